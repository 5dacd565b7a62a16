"""
Application package initializer.

``main`` assembles the FastAPI application.  Storage lives in
``core.db``, business rules in ``services``, payload schemas in
``schemas`` and HTTP routes under ``api/<version>/``.
"""

from .main import app  # noqa: F401
