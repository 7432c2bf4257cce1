"""
Admin repository: BaseRepository specialized for the `admins` table.
"""

from ..database.transaction import Transaction
from ..models.admin import Admin
from .base_repository import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    def __init__(self, tx: Transaction):
        super().__init__(Admin, tx)
