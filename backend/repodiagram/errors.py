"""Error taxonomy shared by the request path and the background worker."""


class DiagramServiceError(Exception):
    """Base class for every failure the service knows how to report."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RepoDataError(DiagramServiceError):
    """A repository metadata, tree or README fetch returned a non-success status."""


class CompletionError(DiagramServiceError):
    """The language-model completion call failed."""


class ValidationError(DiagramServiceError):
    """The inbound request is malformed (missing owner or repo)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class InternalError(DiagramServiceError):
    """Unexpected failure inside the pipeline or its collaborators."""
