"""
Side-car file session storage.

Stores the session for `video.mp4` in `video.mp4.session` as JSON.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..api.errors import TransportError
from ..api.transport import Transport, TransportRequest
from ..api.config import TimeoutConfig
from ..exceptions import ProtocolError, SessionError
from ..logging import get_logger
from .models import UploadSession
from .protocols import SessionStore


class SidecarSessionStore(SessionStore):
    """
    Session storage in a JSON file next to the source file.

    A missing file means there is no active session. A file that cannot
    be parsed is treated the same way and logged.

    Example:
        >>> store = SidecarSessionStore()
        >>> session = store.open(Path("talk.mp4"))
        >>> if session is None:
        ...     session = await store.create(transport, metadata, size, UPLOAD_URL)
        ...     store.save(Path("talk.mp4"), session)
    """

    EXTENSION = '.session'

    def __init__(self, timeout: Optional[TimeoutConfig] = None):
        self._timeout = timeout or TimeoutConfig()
        self._logger = get_logger('youtubeup.session')

    @classmethod
    def path_for(cls, file_path: Union[str, Path]) -> Path:
        """Get the side-car path for a source file."""
        file_path = Path(file_path)
        return file_path.with_name(file_path.name + cls.EXTENSION)

    def exists(self, file_path: Path) -> bool:
        return self.path_for(file_path).is_file()

    def open(self, file_path: Path) -> Optional[UploadSession]:
        path = self.path_for(file_path)
        try:
            raw = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None

        try:
            session = UploadSession.from_json(raw)
        except (KeyError, ValueError) as e:
            self._logger.warning(f"Ignoring unreadable session file {path}: {e}")
            return None

        if not session.is_valid():
            self._logger.warning(f"Ignoring invalid session in {path}")
            return None

        self._logger.debug(f"Loaded session from {path}")
        return session

    def save(self, file_path: Path, session: UploadSession) -> None:
        """
        Persist a session atomically.

        The JSON is written to a temporary file, flushed to disk and then
        renamed over the side-car, so a crash never leaves a partial file.

        Raises:
            SessionError: If the session is invalid
            OSError: If the file cannot be written
        """
        if not session.is_valid():
            raise SessionError(f"Refusing to save invalid session: {session!r}")

        path = self.path_for(file_path)
        fd, tmp_name = tempfile.mkstemp(prefix=path.name, suffix='.tmp', dir=str(path.parent))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(session.to_json())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        self._logger.debug(f"Session saved to {path}")

    def discard(self, file_path: Path) -> None:
        path = self.path_for(file_path)
        try:
            path.unlink()
            self._logger.debug(f"Session file {path} removed")
        except FileNotFoundError:
            pass

    async def create(
        self,
        transport: Transport,
        metadata: Mapping[str, Any],
        size: int,
        upload_url: str,
        content_type: str = 'video/*'
    ) -> UploadSession:
        """
        Open a new resumable session.

        Args:
            transport: Authenticated transport
            metadata: JSON-serializable resource metadata
            size: Total byte length of the source file
            upload_url: Session initiation endpoint
            content_type: Media type of the bytes that will follow

        Returns:
            New session (not yet persisted)

        Raises:
            ProtocolError: If the service answers with a non-success status
            SessionError: If no Location header comes back or the request fails
        """
        if size <= 0:
            raise SessionError(f"Cannot open a session for {size} bytes")

        body = json.dumps(dict(metadata)).encode('utf-8')
        request = TransportRequest(
            'POST',
            upload_url,
            headers={
                'Content-Type': 'application/json; charset=utf-8',
                'X-Upload-Content-Length': str(size),
                'X-Upload-Content-Type': content_type,
            },
            body=body,
            timeout=self._timeout.to_probe_timeout()
        )

        self._logger.info(f"Creating upload session for {size} bytes")
        try:
            response = await transport.send(request)
        except TransportError as e:
            raise SessionError(f"Session initiation request failed: {e}") from e

        if response.status not in (200, 201):
            raise ProtocolError.from_response('Session initiation', response.status, response.text())

        location = response.header('Location')
        if not location:
            raise SessionError(
                "Session initiation succeeded but returned no Location header",
                status=response.status,
                body=response.text()
            )

        self._logger.debug(f"Session URL: {location}")
        return UploadSession(url=location, size=size)
