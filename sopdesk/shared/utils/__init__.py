"""Shared utilities: datetime, generators."""

from sopdesk.shared.utils.datetime import add_months, ensure_utc, utc_now
from sopdesk.shared.utils.generators import generate_cuid, generate_order_id

__all__ = [
    "generate_cuid",
    "generate_order_id",
    "utc_now",
    "ensure_utc",
    "add_months",
]
