from fastapi import APIRouter

from . import analytics, auth, health, notifications, reservations, staff


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(auth.router)
    router.include_router(staff.router)
    router.include_router(reservations.router)
    router.include_router(analytics.router)
    router.include_router(notifications.router)
    return router
