"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so collection names
stay consistent and act as the single source of truth for the "schema".

Document ids:
    users, employees      -> identity-provider subject id (unique by construction)
    system_settings       -> owner id (one per tenant)
    subscriptions         -> user subject id (one per user)
    employee_sop_progress -> "<employee subject id>__<sop id>"
    everything else       -> generated CUID2
"""

COLLECTION_USERS = "users"
COLLECTION_EMPLOYEES = "employees"
COLLECTION_SOPS = "sops"
COLLECTION_TRAINING_VIDEOS = "training_videos"
COLLECTION_EMPLOYEE_SOP_PROGRESS = "employee_sop_progress"
COLLECTION_SUBSCRIPTIONS = "subscriptions"
COLLECTION_SYSTEM_SETTINGS = "system_settings"
COLLECTION_SYSTEM_LOGS = "system_logs"
