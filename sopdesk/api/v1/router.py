"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use providers from sopdesk.api.v1.dependencies.
"""

from fastapi import APIRouter

from sopdesk.api.v1.endpoints import (
    auth,
    employee,
    employees,
    health,
    logs,
    me,
    media,
    payments,
    settings,
    sops,
    stats,
    subscription,
    training,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(sops.router, prefix="/sops", tags=["sops"])
api_router.include_router(employee.router, prefix="/employee", tags=["employee"])
api_router.include_router(training.router, prefix="/training", tags=["training"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(logs.router, prefix="/logs", tags=["logs"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(subscription.router, prefix="/subscription", tags=["subscription"])
api_router.include_router(media.router, prefix="/media", tags=["media"])
