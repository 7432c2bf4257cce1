from .builder import make_dict_config, setup_logging
from .filters import RedactFilter, RequestIdFilter, get_request_id, reset_request_id, set_request_id
from .middleware import RequestIDMiddleware

__all__ = [
    "RedactFilter",
    "RequestIDMiddleware",
    "RequestIdFilter",
    "get_request_id",
    "make_dict_config",
    "reset_request_id",
    "set_request_id",
    "setup_logging",
]
