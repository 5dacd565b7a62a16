"""
Pydantic schema definitions for API payloads.

Schemas are separated from storage rows so the wire names used by chat
clients (``from``, ``lastStatus``) stay independent of column names.
"""
