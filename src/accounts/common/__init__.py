from .patch import Patch, encode_patch, zero_value
from .pagination import limit_offset

__all__ = ["Patch", "encode_patch", "zero_value", "limit_offset"]
