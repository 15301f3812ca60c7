import re

from repodiagram.core.config import settings

# click <Component> "<path>"
CLICK_EVENT_RE = re.compile(r'click ([^\s"]+)\s+"([^"]+)"')


def _clean_path(path: str) -> str:
    path = path.strip()
    path = re.sub(r"^[\"']", "", path)
    return re.sub(r"[\"']$", "", path)


def is_file_path(path: str) -> bool:
    """A path is treated as a file when its last segment has an extension."""
    return "." in path.split("/")[-1]


def build_repository_url(
    owner: str, repo: str, branch: str, path: str, *, host: str | None = None
) -> str:
    base_url = f"{(host or settings.GITHUB_WEB_URL).rstrip('/')}/{owner}/{repo}"
    path_type = "blob" if is_file_path(path) else "tree"
    return f"{base_url}/{path_type}/{branch}/{path}"


def rewrite_click_events(
    diagram: str, owner: str, repo: str, branch: str, *, host: str | None = None
) -> str:
    """Point every click directive at its absolute repository URL.

    Component names are left alone, as is any text that is not a click directive.
    """

    def _replace(match: re.Match) -> str:
        component_name = match.group(1)
        path = _clean_path(match.group(2))
        url = build_repository_url(owner, repo, branch, path, host=host)
        return f'click {component_name} "{url}"'

    return CLICK_EVENT_RE.sub(_replace, diagram)
