from pydantic import BaseModel, ConfigDict

from ..common.patch import Patch
from .common import ListFilter


class AdminCreate(BaseModel):
    """Input of the admin create operation; new admins are always active."""

    name: str = ""
    surname: str = ""
    email: str = ""
    password: str = ""


class AdminUpdate(BaseModel):
    name: Patch[str] = Patch.unset()
    surname: Patch[str] = Patch.unset()
    email: Patch[str] = Patch.unset()
    password: Patch[str] = Patch.unset()
    active: Patch[bool] = Patch.unset()


class AdminFilter(ListFilter):
    pass


class AdminRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    email: str
    active: bool
