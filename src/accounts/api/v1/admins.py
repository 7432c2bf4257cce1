from fastapi import APIRouter, Depends, Response, status

from ...core.dependencies import get_admin_service
from ...schemas.admin import AdminCreate, AdminFilter, AdminRead, AdminUpdate
from ...schemas.common import PaginatedResponse
from ...services.admin_service import AdminService

router = APIRouter(prefix="/admins", tags=["admins"])


@router.post("", response_model=AdminRead, status_code=status.HTTP_201_CREATED)
async def create_admin(payload: AdminCreate, service: AdminService = Depends(get_admin_service)):
    return await service.create(payload)


@router.get("", response_model=PaginatedResponse[AdminRead])
async def list_admins(filters: AdminFilter = Depends(), service: AdminService = Depends(get_admin_service)):
    admins, total = await service.find_many(filters)
    return PaginatedResponse[AdminRead](
        data=[AdminRead.model_validate(a) for a in admins],
        total_results=total,
        current_page=max(filters.page, 1),
        items_per_page=filters.limit,
    )


@router.get("/{admin_id}", response_model=AdminRead)
async def get_admin(admin_id: int, service: AdminService = Depends(get_admin_service)):
    return await service.find_by_id(admin_id)


@router.patch("/{admin_id}", response_model=AdminRead)
async def update_admin(admin_id: int, payload: AdminUpdate, service: AdminService = Depends(get_admin_service)):
    return await service.update(admin_id, payload)


@router.delete("/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_admin(admin_id: int, service: AdminService = Depends(get_admin_service)) -> Response:
    await service.delete(admin_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
