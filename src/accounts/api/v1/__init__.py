from fastapi import APIRouter

from . import admins, users

router = APIRouter(prefix="/api/v1")
router.include_router(users.router)
router.include_router(admins.router)

__all__ = ["router"]
