"""
Session storage protocols.

Defines the interface the coordinator uses to persist upload sessions.
"""
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .models import UploadSession


@runtime_checkable
class SessionStore(Protocol):
    """
    Protocol for upload session storage.
    
    The store is the only writer of a session's persisted form.
    """
    
    def open(self, file_path: Path) -> Optional[UploadSession]:
        """
        Load the session persisted for a source file.
        
        Returns:
            UploadSession if a valid one exists, None otherwise
        """
        ...
    
    async def create(
        self,
        transport: Any,
        metadata: Mapping[str, Any],
        size: int,
        upload_url: str,
        content_type: str = 'video/*'
    ) -> UploadSession:
        """
        Open a new session on the remote service.
        
        Raises:
            ProtocolError: On a non-success response
            SessionError: If no session URL comes back
        """
        ...
    
    def save(self, file_path: Path, session: UploadSession) -> None:
        """Persist a session, replacing any previous one."""
        ...
    
    def discard(self, file_path: Path) -> None:
        """Remove the persisted session."""
        ...
    
    def exists(self, file_path: Path) -> bool:
        """Check if a session is persisted for a source file."""
        ...
