"""Process entry point: `python -m sopdesk` or the `sopdesk` console script.

Configuration is validated before the app is imported, so a missing
required setting is logged and the process exits non-zero.
"""

import logging
import sys

from pydantic import ValidationError

logger = logging.getLogger("sopdesk")


def main() -> None:
    import uvicorn

    from sopdesk.core.config import get_settings

    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.ERROR, format="%(levelname)s - %(message)s")
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)
    uvicorn.run("sopdesk.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
