"""Utilities package"""

from .helpers import generate_slug, unique_slug, generate_order_number, as_naive_utc
from .pagination import paginate, PaginationParams, get_pagination_params

__all__ = [
    "generate_slug",
    "unique_slug",
    "generate_order_number",
    "as_naive_utc",
    "paginate",
    "PaginationParams",
    "get_pagination_params",
]
