from .admin import AdminCreate, AdminFilter, AdminRead, AdminUpdate
from .common import ListFilter, PaginatedResponse
from .user import UserCreate, UserFilter, UserRead, UserUpdate

__all__ = [
    "AdminCreate",
    "AdminFilter",
    "AdminRead",
    "AdminUpdate",
    "ListFilter",
    "PaginatedResponse",
    "UserCreate",
    "UserFilter",
    "UserRead",
    "UserUpdate",
]
