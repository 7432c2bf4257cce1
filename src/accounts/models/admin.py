from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ..database.base import Base, IdType
from ..validators.entity_validators import validate_admin


class Admin(Base):
    """
    SQLAlchemy model for Admin.

    Same identity fields as User; instead of a phone number an admin carries
    an `active` flag, true on creation.
    """
    __tablename__ = "admins"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Whether the admin account is active
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def validate(self) -> None:
        validate_admin(self)

    def __repr__(self) -> str:
        return f"<Admin(id={self.id!r}, email={self.email!r}, active={self.active!r})>"
