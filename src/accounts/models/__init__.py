from .admin import Admin
from .user import User

__all__ = ["Admin", "User"]
