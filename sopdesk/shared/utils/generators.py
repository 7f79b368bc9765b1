"""ID and value generators (CUID2 record ids, payment order ids)."""

import time

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

ORDER_ID_PREFIX = "TD_"


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2) for new documents."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_order_id() -> str:
    """Payment order reference: prefix plus epoch milliseconds (e.g. TD_1718000000000)."""
    return f"{ORDER_ID_PREFIX}{int(time.time() * 1000)}"
