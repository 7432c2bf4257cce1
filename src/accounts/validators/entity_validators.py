"""
Structural validation of User / Admin rows.

Checks run in a fixed order and the first failure wins; there is no error
aggregation. Every failure is an INVALID AppError with a field-specific
message.
"""

from email_validator import EmailNotValidError, validate_email

from ..exceptions import ErrorKind, errorf


def is_valid_email(value: str | None) -> bool:
    """Syntax-only check (no DNS lookups)."""
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_account_fields(name: str | None, surname: str | None, email: str | None, password: str | None) -> None:
    """Checks shared by both entity kinds."""
    if not name:
        raise errorf(ErrorKind.INVALID, "Name is required")
    if not surname:
        raise errorf(ErrorKind.INVALID, "Surname is required")
    if not is_valid_email(email):
        raise errorf(ErrorKind.INVALID, "Email is invalid")
    if not password:
        raise errorf(ErrorKind.INVALID, "Password is required")


def validate_user(user) -> None:
    validate_account_fields(user.name, user.surname, user.email, user.password)
    if not user.phone:
        raise errorf(ErrorKind.INVALID, "Phone is required")


def validate_admin(admin) -> None:
    validate_account_fields(admin.name, admin.surname, admin.email, admin.password)
