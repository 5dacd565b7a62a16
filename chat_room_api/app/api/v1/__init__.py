"""
Version 1 of the API.

This subpackage bundles the participant, message and heartbeat
endpoints of the chat room.  Breaking changes should be introduced in
a new version subpackage (e.g. ``v2``).
"""
