"""
Top-level package for the Chat Room API.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
