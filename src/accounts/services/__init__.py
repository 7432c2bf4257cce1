from .admin_service import AdminService
from .base_service import AccountService
from .user_service import UserService

__all__ = ["AccountService", "AdminService", "UserService"]
