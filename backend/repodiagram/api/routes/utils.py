from fastapi import APIRouter

router = APIRouter(prefix="/utils", tags=["utils"])


# Both spellings are registered so neither falls through to /{owner}/{repo}.
@router.get("/health-check", include_in_schema=False)
@router.get("/health-check/")
async def health_check() -> bool:
    return True
