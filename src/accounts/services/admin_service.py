from ..models.admin import Admin
from ..repositories.admin_repository import AdminRepository
from ..schemas.admin import AdminCreate, AdminUpdate
from .base_service import AccountService


class AdminService(AccountService[Admin]):
    repository_class = AdminRepository

    def build_entity(self, data: AdminCreate, hashed_password: str) -> Admin:
        # admins start active
        return Admin(
            name=data.name,
            surname=data.surname,
            email=data.email,
            password=hashed_password,
            active=True,
        )

    def apply_patch(self, entity: Admin, patch: AdminUpdate) -> None:
        if patch.name.is_set:
            entity.name = patch.name.value
        if patch.surname.is_set:
            entity.surname = patch.surname.value
        if patch.email.is_set:
            entity.email = patch.email.value
        if patch.active.is_set:
            entity.active = patch.active.value
