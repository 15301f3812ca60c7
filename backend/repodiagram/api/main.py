from fastapi import APIRouter

from repodiagram.api.routes import diagrams, utils

api_router = APIRouter()
# utils first so its fixed paths win over the /{owner}/{repo} pattern
api_router.include_router(utils.router)
api_router.include_router(diagrams.router, tags=["diagrams"])
