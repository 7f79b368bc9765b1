"""Firestore-backed repository implementations."""

from sopdesk.infrastructure.firebase.repositories.employee_repo_firestore import (
    FirestoreEmployeeRepository,
)
from sopdesk.infrastructure.firebase.repositories.progress_repo_firestore import (
    FirestoreProgressRepository,
)
from sopdesk.infrastructure.firebase.repositories.settings_repo_firestore import (
    FirestoreSettingsRepository,
)
from sopdesk.infrastructure.firebase.repositories.sop_repo_firestore import (
    FirestoreSopRepository,
)
from sopdesk.infrastructure.firebase.repositories.subscription_repo_firestore import (
    FirestoreSubscriptionRepository,
)
from sopdesk.infrastructure.firebase.repositories.system_log_repo_firestore import (
    FirestoreSystemLogRepository,
)
from sopdesk.infrastructure.firebase.repositories.training_repo_firestore import (
    FirestoreTrainingRepository,
)
from sopdesk.infrastructure.firebase.repositories.user_repo_firestore import (
    FirestoreUserRepository,
)

__all__ = [
    "FirestoreEmployeeRepository",
    "FirestoreProgressRepository",
    "FirestoreSettingsRepository",
    "FirestoreSopRepository",
    "FirestoreSubscriptionRepository",
    "FirestoreSystemLogRepository",
    "FirestoreTrainingRepository",
    "FirestoreUserRepository",
]
