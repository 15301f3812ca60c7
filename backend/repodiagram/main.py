import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.cors import CORSMiddleware

from repodiagram.agent.llm_client import CompletionService, LLMClient
from repodiagram.agent.repo_data import GitHubRepoDataSource, RepoDataSource
from repodiagram.api.main import api_router
from repodiagram.core.config import settings
from repodiagram.core.db import engine, init_db
from repodiagram.errors import DiagramServiceError, ValidationError
from repodiagram.models import ErrorResponse
from repodiagram.services.cache import CacheStore, MemoryCacheStore, SQLCacheStore
from repodiagram.services.coordinator import JobCoordinator
from repodiagram.services.queue import InMemoryJobQueue, JobQueue
from repodiagram.services.worker import JobWorker

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_cache_store() -> CacheStore:
    if settings.CACHE_BACKEND == "memory":
        return MemoryCacheStore()
    init_db(engine)
    return SQLCacheStore(engine)


def create_app(
    *,
    cache: CacheStore | None = None,
    queue: JobQueue | None = None,
    source: RepoDataSource | None = None,
    llm: CompletionService | None = None,
    run_worker: bool | None = None,
) -> FastAPI:
    """Build the application. Collaborators default to the configured concrete implementations."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = cache or build_cache_store()
        job_queue = queue or InMemoryJobQueue()
        data_source = source or GitHubRepoDataSource()
        completion = llm or LLMClient()

        app.state.cache = store
        app.state.queue = job_queue
        app.state.coordinator = JobCoordinator(store, job_queue)
        app.state.worker = JobWorker(store, job_queue, source=data_source, llm=completion)

        stop_event = asyncio.Event()
        worker_task: asyncio.Task | None = None
        if settings.WORKER_ENABLED if run_worker is None else run_worker:
            worker_task = asyncio.create_task(app.state.worker.run_forever(stop_event))
        logger.info("%s is ready.", settings.PROJECT_NAME)

        yield

        stop_event.set()
        if worker_task is not None:
            worker_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker_task
        if source is None and isinstance(data_source, GitHubRepoDataSource):
            await data_source.aclose()
        if llm is None:
            await completion.aclose()
        logger.info("%s shut down.", settings.PROJECT_NAME)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(DiagramServiceError)
    async def service_error_handler(request: Request, exc: DiagramServiceError) -> JSONResponse:
        logger.error("Error processing request %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", message=exc.message).model_dump(),
        )

    app.include_router(api_router)
    return app


app = create_app()
