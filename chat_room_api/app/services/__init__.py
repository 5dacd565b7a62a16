"""
Service layer.

Services hold the chat room's business rules on top of the
``ChatStore`` they receive at construction time, so endpoints and the
liveness sweeper share the same store client without globals.
"""
