"""Process-wide collaborators, built once at startup.

Optional integrations are None when their configuration is absent; call
sites check for None and raise ServiceUnavailableException (or degrade, for
certificates) instead of failing at startup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

import httpx

from sopdesk.application.interfaces.repositories import (
    IEmployeeRepository,
    IProgressRepository,
    ISettingsRepository,
    ISopRepository,
    ISubscriptionRepository,
    ISystemLogRepository,
    ITrainingRepository,
    IUserRepository,
)
from sopdesk.application.interfaces.services import (
    ICertificateRenderer,
    IEventPublisher,
    IManagedIdentity,
    IMediaSigner,
    IPaymentGateway,
    ITokenVerifier,
)
from sopdesk.core.config import Settings
from sopdesk.infrastructure.external.certificates import HttpCertificateRenderer
from sopdesk.infrastructure.external.identity import IdentityToolkitClient
from sopdesk.infrastructure.external.media import MediaUploadSigner
from sopdesk.infrastructure.external.payments import CashfreeGateway
from sopdesk.infrastructure.firebase import init_firestore, load_service_account_info
from sopdesk.infrastructure.firebase._rest_client import FirestoreRESTClient
from sopdesk.infrastructure.firebase.repositories import (
    FirestoreEmployeeRepository,
    FirestoreProgressRepository,
    FirestoreSettingsRepository,
    FirestoreSopRepository,
    FirestoreSubscriptionRepository,
    FirestoreSystemLogRepository,
    FirestoreTrainingRepository,
    FirestoreUserRepository,
)
from sopdesk.infrastructure.messaging import EventBus, SystemLogRecorder, log_event
from sopdesk.infrastructure.security import FirebaseTokenVerifier

logger = logging.getLogger(__name__)


@dataclass
class Capabilities:
    verifier: ITokenVerifier
    users: IUserRepository
    employees: IEmployeeRepository
    sops: ISopRepository
    trainings: ITrainingRepository
    progress: IProgressRepository
    subscriptions: ISubscriptionRepository
    settings: ISettingsRepository
    system_logs: ISystemLogRepository
    events: IEventPublisher
    managed_identity: IManagedIdentity | None = None
    payments: IPaymentGateway | None = None
    certificates: ICertificateRenderer | None = None
    media: IMediaSigner | None = None


def build_event_bus(system_logs: ISystemLogRepository) -> EventBus:
    return EventBus([SystemLogRecorder(system_logs), log_event])


def build_capabilities(
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> tuple[Capabilities, FirestoreRESTClient]:
    """Wire repositories and integrations from settings.

    Raises FirebaseConfigurationError when the record store cannot be
    configured; startup is expected to abort in that case.
    """
    key_dict = load_service_account_info(settings)
    store = init_firestore(key_dict)

    system_logs = FirestoreSystemLogRepository(store)
    verifier = FirebaseTokenVerifier(
        settings.firebase_project_id,
        settings.firebase_jwks_url,
        http_client,
        cache_ttl_seconds=settings.jwks_cache_ttl_seconds,
        cache_max_entries=settings.jwks_cache_max_entries,
        fetch_timeout_seconds=settings.jwks_fetch_timeout_seconds,
    )
    caps = Capabilities(
        verifier=verifier,
        users=FirestoreUserRepository(store),
        employees=FirestoreEmployeeRepository(store),
        sops=FirestoreSopRepository(store),
        trainings=FirestoreTrainingRepository(store),
        progress=FirestoreProgressRepository(store),
        subscriptions=FirestoreSubscriptionRepository(store),
        settings=FirestoreSettingsRepository(store),
        system_logs=system_logs,
        events=build_event_bus(system_logs),
    )

    if settings.managed_identity_enabled:
        caps.managed_identity = IdentityToolkitClient.from_service_account(key_dict, http_client)
        logger.info("Managed identity enabled")
    if settings.payments_configured:
        caps.payments = CashfreeGateway(
            http_client,
            settings.cashfree_app_id,
            settings.cashfree_secret.get_secret_value(),
            base_url=settings.cashfree_base_url,
            api_version=settings.cashfree_api_version,
            timeout_seconds=settings.payment_timeout_seconds,
        )
        logger.info("Payments enabled")
    if settings.certificate_service_url:
        caps.certificates = HttpCertificateRenderer(
            http_client,
            settings.certificate_service_url,
            timeout_seconds=settings.certificate_timeout_seconds,
        )
        logger.info("Certificate rendering enabled")
    else:
        logger.warning("CERTIFICATE_SERVICE_URL not set; SOP completions will have no certificate")
    if settings.media_configured:
        caps.media = MediaUploadSigner(
            settings.media_bucket,
            region=settings.media_region,
            endpoint_url=settings.media_endpoint_url,
            access_key=settings.media_access_key,
            secret_key=(
                settings.media_secret_key.get_secret_value()
                if settings.media_secret_key
                else None
            ),
            base_folder=settings.media_upload_folder,
            expiration=timedelta(seconds=settings.media_upload_expiry_seconds),
            max_upload_bytes=settings.media_max_upload_mb * 1024 * 1024,
        )
        logger.info("Media upload signing enabled")
    return caps, store
