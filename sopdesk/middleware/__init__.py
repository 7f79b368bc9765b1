"""HTTP middleware: request timeout and request ID.

Applied in sopdesk.main; first added = outermost.
"""

from sopdesk.middleware.request_id import RequestIDMiddleware
from sopdesk.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware"]
