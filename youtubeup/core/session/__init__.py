"""
Session management module.

Persists resumable upload sessions next to the source file so an
interrupted upload can continue in a later run.
"""
from .protocols import SessionStore
from .models import UploadSession
from .sidecar_store import SidecarSessionStore

__all__ = [
    'SessionStore',
    'UploadSession',
    'SidecarSessionStore',
]
