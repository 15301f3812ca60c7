import httpx
import pytest

from repodiagram.agent.repo_data import GitHubRepoDataSource, fetch_snapshot
from repodiagram.errors import RepoDataError

API = "https://api.github.test"


def _handler(*, repo_info=None, tree_status=200, readme_status=200):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        url = str(request.url)
        if url == f"{API}/repos/octocat/hello-world":
            return httpx.Response(200, json=repo_info if repo_info is not None else {"default_branch": "trunk"})
        if url.startswith(f"{API}/repos/octocat/hello-world/git/trees/"):
            if tree_status != 200:
                return httpx.Response(tree_status, json={"message": "nope"})
            return httpx.Response(
                200,
                json={
                    "tree": [
                        {"path": "src"},
                        {"path": "src/main.py"},
                        {"path": "node_modules/left-pad/index.js"},
                        {"path": "docs/logo.png"},
                        {"path": "README.md"},
                    ]
                },
            )
        if url == f"{API}/repos/octocat/hello-world/readme":
            if readme_status != 200:
                return httpx.Response(readme_status)
            return httpx.Response(200, json={"download_url": "https://raw.test/octocat/README.md"})
        if url == "https://raw.test/octocat/README.md":
            return httpx.Response(200, text="# Hello World")
        return httpx.Response(404)

    return handler, seen


def _source(handler, token="secret") -> GitHubRepoDataSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubRepoDataSource(client, api_url=API, token=token, user_agent="repodiagram-tests")


@pytest.mark.asyncio
async def test_fetch_snapshot_filters_tree_and_reads_readme():
    handler, seen = _handler()
    source = _source(handler)

    snapshot = await fetch_snapshot(source, "octocat", "hello-world")

    assert snapshot.default_branch == "trunk"
    assert snapshot.paths == ["src", "src/main.py", "README.md"]
    assert snapshot.file_tree == "src\nsrc/main.py\nREADME.md"
    assert snapshot.readme == "# Hello World"

    tree_request = seen[1]
    assert tree_request.url.path.endswith("/git/trees/trunk")
    assert tree_request.url.params["recursive"] == "1"
    assert tree_request.headers["Authorization"] == "token secret"
    assert tree_request.headers["User-Agent"] == "repodiagram-tests"
    await source.aclose()


@pytest.mark.asyncio
async def test_missing_default_branch_falls_back_to_main():
    handler, seen = _handler(repo_info={"default_branch": None})
    source = _source(handler, token="")

    snapshot = await fetch_snapshot(source, "octocat", "hello-world")

    assert snapshot.default_branch == "main"
    assert seen[1].url.path.endswith("/git/trees/main")
    assert "Authorization" not in seen[0].headers
    await source.aclose()


@pytest.mark.asyncio
async def test_tree_failure_raises_with_status_code():
    handler, _ = _handler(tree_status=409)
    source = _source(handler)

    with pytest.raises(RepoDataError) as exc_info:
        await fetch_snapshot(source, "octocat", "hello-world")

    assert exc_info.value.status_code == 409
    assert str(exc_info.value) == "Failed to fetch file tree: 409"
    await source.aclose()


@pytest.mark.asyncio
async def test_readme_failure_aborts_the_fetch():
    handler, _ = _handler(readme_status=404)
    source = _source(handler)

    with pytest.raises(RepoDataError) as exc_info:
        await fetch_snapshot(source, "octocat", "hello-world")

    assert exc_info.value.status_code == 404
    await source.aclose()


@pytest.mark.asyncio
async def test_transport_errors_become_repo_data_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    source = _source(handler)
    with pytest.raises(RepoDataError) as exc_info:
        await source.get_repository("octocat", "hello-world")

    assert exc_info.value.status_code is None
    await source.aclose()
