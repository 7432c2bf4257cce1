"""
User repository: BaseRepository specialized for the `users` table.
"""

from ..database.transaction import Transaction
from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, tx: Transaction):
        super().__init__(User, tx)
