"""Page/limit helpers shared by the list queries."""


def limit_offset(limit: int, page: int) -> tuple[int | None, int]:
    """
    Translate a (limit, page) pair into SQL LIMIT / OFFSET values.

    - limit <= 0 disables pagination: (None, 0)
    - pages are 1-based; page < 1 is treated as the first page
    """
    if limit <= 0:
        return None, 0

    page = max(page, 1)
    return limit, (page - 1) * limit
