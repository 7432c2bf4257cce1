from pydantic import BaseModel, ConfigDict

from ..common.patch import Patch
from .common import ListFilter


class UserCreate(BaseModel):
    """
    Input of the user create operation.

    Fields default to their empty value so that missing data is reported by
    entity validation ("Phone is required", ...) rather than by the parser.
    """

    name: str = ""
    surname: str = ""
    email: str = ""
    password: str = ""
    phone: int = 0


class UserUpdate(BaseModel):
    """Partial update: only fields present in the payload are applied."""

    name: Patch[str] = Patch.unset()
    surname: Patch[str] = Patch.unset()
    email: Patch[str] = Patch.unset()
    password: Patch[str] = Patch.unset()
    phone: Patch[int] = Patch.unset()


class UserFilter(ListFilter):
    pass


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    email: str
    phone: int
