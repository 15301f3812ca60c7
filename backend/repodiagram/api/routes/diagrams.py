from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from repodiagram.api.deps import CoordinatorDep
from repodiagram.errors import ValidationError
from repodiagram.models import PendingResponse
from repodiagram.services.coordinator import INVALID_PATH_MESSAGE, DiagramResponse

router = APIRouter()

MERMAID_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <body>
    <pre class="mermaid">
{diagram}
    </pre>
    <script type="module">
      import mermaid from 'https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.esm.min.mjs';
    </script>
  </body>
</html>"""


def render_diagram_page(diagram: str) -> str:
    return MERMAID_PAGE_TEMPLATE.format(diagram=diagram)


def _to_http_response(result: DiagramResponse, *, as_html: bool = False) -> Response:
    record = result.record
    if result.status == "pending" or record is None:
        return JSONResponse(
            status_code=202,
            content=PendingResponse(message=result.message or "").model_dump(),
        )

    if result.status == "error":
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "error": "Diagram generation failed",
                "message": record.error,
                "failed_at": record.failed_at.isoformat() if record.failed_at else None,
            },
        )

    diagram = record.diagram or ""
    if as_html:
        return HTMLResponse(render_diagram_page(diagram))
    return PlainTextResponse(diagram)


@router.get("/")
async def missing_owner() -> Response:
    raise ValidationError(INVALID_PATH_MESSAGE)


@router.get("/{owner}")
async def missing_repo(owner: str) -> Response:
    raise ValidationError(INVALID_PATH_MESSAGE)


@router.get("/{owner}/{repo}/image.html", response_class=HTMLResponse)
async def get_diagram_page(owner: str, repo: str, coordinator: CoordinatorDep) -> Response:
    """
    HTML page rendering the diagram with Mermaid. Falls back to the same
    pending/error responses as the plain endpoint until the diagram exists.
    """
    result = await coordinator.handle(owner, repo)
    return _to_http_response(result, as_html=True)


@router.get("/{owner}/{repo}", response_class=PlainTextResponse)
async def get_diagram(owner: str, repo: str, coordinator: CoordinatorDep) -> Response:
    """
    Return the diagram markup when it is ready. Otherwise respond 202 and,
    if nothing is cached yet, admit a background generation job.
    """
    result = await coordinator.handle(owner, repo)
    return _to_http_response(result)
