from .admin_repository import AdminRepository
from .base_repository import BaseRepository
from .user_repository import UserRepository

__all__ = ["AdminRepository", "BaseRepository", "UserRepository"]
