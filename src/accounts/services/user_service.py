from ..models.user import User
from ..repositories.user_repository import UserRepository
from ..schemas.user import UserCreate, UserUpdate
from .base_service import AccountService


class UserService(AccountService[User]):
    repository_class = UserRepository

    def build_entity(self, data: UserCreate, hashed_password: str) -> User:
        return User(
            name=data.name,
            surname=data.surname,
            email=data.email,
            password=hashed_password,
            phone=data.phone,
        )

    def apply_patch(self, entity: User, patch: UserUpdate) -> None:
        # password is rehashed by the caller
        if patch.name.is_set:
            entity.name = patch.name.value
        if patch.surname.is_set:
            entity.surname = patch.surname.value
        if patch.email.is_set:
            entity.email = patch.email.value
        if patch.phone.is_set:
            entity.phone = patch.phone.value
