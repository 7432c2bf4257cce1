"""
FastAPI dependencies.

The Database and the password hasher live on `app.state` (set by the app
factory); services are built per request on top of them.
"""

from fastapi import Depends, Request

from ..database.transaction import Database
from ..security.passwords import PasswordHasher
from ..services import AdminService, UserService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_user_service(
    database: Database = Depends(get_database),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(database, hasher)


def get_admin_service(
    database: Database = Depends(get_database),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AdminService:
    return AdminService(database, hasher)
