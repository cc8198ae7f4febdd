from fastapi import APIRouter, Depends

from backend.app.dependencies.repository import get_repository
from backend.app.services.repository import Repository

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(repo: Repository = Depends(get_repository)):
    return {"status": "ok", "backend": repo.backend_name}
