from fastapi import APIRouter, Depends, Response, status

from ...core.dependencies import get_user_service
from ...schemas.common import PaginatedResponse
from ...schemas.user import UserCreate, UserFilter, UserRead, UserUpdate
from ...services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)):
    return await service.create(payload)


@router.get("", response_model=PaginatedResponse[UserRead])
async def list_users(filters: UserFilter = Depends(), service: UserService = Depends(get_user_service)):
    users, total = await service.find_many(filters)
    return PaginatedResponse[UserRead](
        data=[UserRead.model_validate(u) for u in users],
        total_results=total,
        current_page=max(filters.page, 1),
        items_per_page=filters.limit,
    )


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return await service.find_by_id(user_id)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(user_id: int, payload: UserUpdate, service: UserService = Depends(get_user_service)):
    return await service.update(user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)) -> Response:
    await service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
