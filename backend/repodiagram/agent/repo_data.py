import logging
from typing import Any, Protocol

import httpx

from repodiagram.agent.artifacts import RepositorySnapshot
from repodiagram.agent.path_filter import filter_paths
from repodiagram.core.config import settings
from repodiagram.errors import RepoDataError

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_FALLBACK = "main"


class RepoDataSource(Protocol):
    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]: ...

    async def get_tree(self, owner: str, repo: str, branch: str) -> list[str]: ...

    async def get_readme(self, owner: str, repo: str) -> str: ...


class GitHubRepoDataSource:
    """Read-only GitHub REST client for the three calls a snapshot needs."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        api_url: str | None = None,
        token: str | None = None,
        user_agent: str | None = None,
    ):
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        resolved_token = token if token is not None else settings.GITHUB_TOKEN

        headers = {
            "User-Agent": user_agent or settings.GITHUB_USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        if resolved_token:
            headers["Authorization"] = f"token {resolved_token}"
        self.headers = headers
        self.client = client or httpx.AsyncClient(timeout=settings.GITHUB_TIMEOUT_SECONDS)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get(self, url: str, what: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.get(url, headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            raise RepoDataError(f"Failed to fetch {what}: {exc}") from exc
        if not response.is_success:
            raise RepoDataError(
                f"Failed to fetch {what}: {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, url: str, what: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._get(url, what, **kwargs)
        try:
            payload = response.json()
        except ValueError as exc:
            raise RepoDataError(f"Failed to fetch {what}: invalid JSON body") from exc
        if not isinstance(payload, dict):
            raise RepoDataError(f"Failed to fetch {what}: unexpected payload")
        return payload

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return await self._get_json(f"{self.api_url}/repos/{owner}/{repo}", "repository info")

    async def get_tree(self, owner: str, repo: str, branch: str) -> list[str]:
        payload = await self._get_json(
            f"{self.api_url}/repos/{owner}/{repo}/git/trees/{branch}",
            "file tree",
            params={"recursive": "1"},
        )
        if payload.get("truncated"):
            logger.warning("GitHub truncated the file tree for %s/%s", owner, repo)
        return [item["path"] for item in payload.get("tree") or [] if item.get("path")]

    async def get_readme(self, owner: str, repo: str) -> str:
        readme_info = await self._get_json(f"{self.api_url}/repos/{owner}/{repo}/readme", "README")
        download_url = readme_info.get("download_url")
        if not download_url:
            raise RepoDataError("Failed to fetch README: no download URL")
        response = await self._get(download_url, "README content")
        return response.text


async def fetch_snapshot(source: RepoDataSource, owner: str, repo: str) -> RepositorySnapshot:
    """Fetch branch, filtered tree and README. Any failed call aborts the whole fetch."""
    repo_info = await source.get_repository(owner, repo)
    default_branch = repo_info.get("default_branch") or DEFAULT_BRANCH_FALLBACK

    paths = await source.get_tree(owner, repo, default_branch)
    kept = filter_paths(paths)
    logger.info(
        "Fetched %s paths for %s/%s@%s (%s kept after filtering)",
        len(paths),
        owner,
        repo,
        default_branch,
        len(kept),
    )

    readme = await source.get_readme(owner, repo)
    return RepositorySnapshot(
        owner=owner,
        repo=repo,
        default_branch=default_branch,
        paths=kept,
        readme=readme,
    )
