"""Firestore client factory (REST-based, no firebase-admin).

Built once at app startup from either FIREBASE_SERVICE_ACCOUNT_KEY (JSON string)
or FIREBASE_SERVICE_ACCOUNT_PATH (file path). Unlike optional integrations,
the record store is required: any failure here aborts startup.
"""

import json
import logging
from pathlib import Path

from sopdesk.core.config import Settings
from sopdesk.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    service_account_credentials,
)

logger = logging.getLogger(__name__)


class FirebaseConfigurationError(RuntimeError):
    """Raised when the service account cannot be loaded or is incomplete."""


def load_service_account_info(settings: Settings) -> dict:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise FirebaseConfigurationError(
                "FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON"
            ) from e
    path = settings.firebase_service_account_path
    if not path:
        raise FirebaseConfigurationError("No Firebase service account configured")
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise FirebaseConfigurationError(
            f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path} (resolved: {resolved})"
        )
    with open(resolved, encoding="utf-8") as f:
        return json.load(f)


def init_firestore(key_dict: dict) -> FirestoreRESTClient:
    """Initialize the Firestore client (REST API + google-auth).

    Returns:
        Ready client; the caller owns it and must aclose() it on shutdown.

    Raises:
        FirebaseConfigurationError: If the service account is missing project_id
            or its credentials cannot be built.
    """
    project_id = key_dict.get("project_id")
    if not project_id:
        raise FirebaseConfigurationError("Firebase service account JSON missing 'project_id'")
    try:
        cred = service_account_credentials(key_dict)
    except (ValueError, KeyError) as e:
        raise FirebaseConfigurationError(f"Invalid Firebase service account: {e}") from e
    logger.info("Firestore client initialized for project %s", project_id)
    return FirestoreRESTClient(project_id, cred)
