"""Firestore integration (REST client, collection names, repositories)."""

from sopdesk.infrastructure.firebase.client import (
    FirebaseConfigurationError,
    init_firestore,
    load_service_account_info,
)

__all__ = [
    "FirebaseConfigurationError",
    "init_firestore",
    "load_service_account_info",
]
