"""Security: identity-provider token verification."""

from sopdesk.infrastructure.security.firebase_token import (
    FirebaseTokenVerifier,
    JwksKeyCache,
)

__all__ = ["FirebaseTokenVerifier", "JwksKeyCache"]
