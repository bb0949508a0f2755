"""List paging shared by the collection endpoints."""
from typing import Tuple

from fastapi import Query

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


class Paging:
    """Dependency reading ``limit``/``offset``; out-of-range values are clamped, not rejected."""

    def __init__(self, limit: int = Query(DEFAULT_LIMIT), offset: int = Query(0)):
        self.limit, self.offset = clamp_paging(limit, offset)


def clamp_paging(limit: int, offset: int) -> Tuple[int, int]:
    return min(MAX_LIMIT, max(1, limit)), max(0, offset)
