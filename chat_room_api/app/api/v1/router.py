"""
Top-level router for version 1 of the API.

This router aggregates the resource routers (participants, messages,
status) under their path prefixes.  The application factory mounts it
at ``settings.api_prefix``, which is empty by default so chat clients
reach ``/participants`` directly.
"""

from fastapi import APIRouter

from .endpoints import messages, participants, status

router = APIRouter()

router.include_router(participants.router, prefix="/participants", tags=["participants"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(status.router, prefix="/status", tags=["status"])
