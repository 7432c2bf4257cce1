from .base import Base
from .session import create_engine
from .transaction import Database, Transaction, truncate_to_second, utc_now

__all__ = ["Base", "Database", "Transaction", "create_engine", "truncate_to_second", "utc_now"]
