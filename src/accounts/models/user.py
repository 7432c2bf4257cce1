from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from ..database.base import Base, IdType
from ..validators.entity_validators import validate_user


class User(Base):
    """
    SQLAlchemy model for User.

    A registered end user. `password` only ever holds the one-way hash.
    """
    __tablename__ = "users"

    # Storage-assigned identifier, immutable once created
    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(100), nullable=False)

    # Email address (must be unique and non-null)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    # Hashed password (never store plain-text passwords)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def validate(self) -> None:
        """Raise AppError(INVALID) on the first invalid field."""
        validate_user(self)

    def __repr__(self) -> str:
        # Helpful for debugging/logging; never include the password hash
        return f"<User(id={self.id!r}, email={self.email!r})>"
