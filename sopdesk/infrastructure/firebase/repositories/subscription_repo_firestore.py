"""Firestore-backed subscription repository (implements ISubscriptionRepository)."""

from __future__ import annotations

from sopdesk.application.dtos.subscription import SubscriptionResult
from sopdesk.domain.enums import SubscriptionStatus
from sopdesk.infrastructure.firebase._rest_client import FirestoreRESTClient
from sopdesk.infrastructure.firebase.collections import COLLECTION_SUBSCRIPTIONS
from sopdesk.shared.utils.datetime import ensure_utc


class FirestoreSubscriptionRepository:
    """Subscription repository using Firestore. Document id is the user's subject id."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_SUBSCRIPTIONS)

    async def get_by_user(self, user_id: str) -> SubscriptionResult | None:
        doc = await self._coll.document(user_id).get()
        if not doc:
            return None
        data = doc.to_dict()
        return SubscriptionResult(
            user_id=doc.id,
            plan_id=data.get("plan_id", ""),
            status=SubscriptionStatus(data.get("status", SubscriptionStatus.ACTIVE.value)),
            start_date=ensure_utc(data["start_date"]),
            end_date=ensure_utc(data["end_date"]),
            order_reference=data.get("order_reference"),
        )

    async def upsert(self, subscription: SubscriptionResult) -> SubscriptionResult:
        await self._coll.document(subscription.user_id).set({
            "user_id": subscription.user_id,
            "plan_id": subscription.plan_id,
            "status": subscription.status.value,
            "start_date": subscription.start_date,
            "end_date": subscription.end_date,
            "order_reference": subscription.order_reference,
        })
        return subscription
