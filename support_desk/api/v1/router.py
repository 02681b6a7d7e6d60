"""Main API router aggregating all v1 routes."""

from fastapi import APIRouter

from support_desk.api.v1 import (
    agents,
    audit_logs,
    auth,
    conversations,
    debug,
    realtime,
    relay,
    webhooks,
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(agents.router)
api_router.include_router(conversations.router)
api_router.include_router(audit_logs.router)
api_router.include_router(webhooks.router)
api_router.include_router(relay.router)
api_router.include_router(realtime.router)
api_router.include_router(debug.router)
