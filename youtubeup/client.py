"""
YouTubeUploader - High-level async client for resumable uploads.

Example:
    >>> async with YouTubeUploader(BearerCredentials(token)) as uploader:
    ...     result = await uploader.upload("talk.mp4", VideoMetadata(title="Talk"))
    ...     print(result.video_id)
"""
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .core.api import (
    AiohttpTransport,
    Credentials,
    Playlist,
    PlaylistService,
    Transport,
    UploaderConfig
)
from .core.exceptions import UploadFailedError
from .core.session import SessionStore, SidecarSessionStore
from .core.upload import (
    ProbeComplete,
    ProbeError,
    ProgressCallback,
    ProgressProber,
    UploadCoordinator,
    UploadProgress,
    UploadResult,
    UploadState,
    VideoMetadata
)


class YouTubeUploader:
    """
    Facade over the transport, session store, coordinator and playlists.

    Owns an AiohttpTransport unless a transport is injected.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        config: Optional[UploaderConfig] = None,
        transport: Optional[Transport] = None,
        session_store: Optional[SessionStore] = None,
        progress_callback: Optional[ProgressCallback] = None
    ):
        """
        Initialize the uploader.

        Args:
            credentials: Supplies the Authorization header (ignored if transport is given)
            config: Uploader configuration
            transport: Optional pre-built transport
            session_store: Optional session store (side-car files by default)
            progress_callback: Optional callback for progress updates
        """
        self._config = (config or UploaderConfig.default()).validate()
        self._owns_transport = transport is None
        self._transport = transport or AiohttpTransport(credentials, self._config)
        self._store = session_store or SidecarSessionStore(self._config.timeout)
        self._progress_callback = progress_callback
        self._playlists = PlaylistService(self._transport, self._config)

    @property
    def config(self) -> UploaderConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    async def __aenter__(self) -> 'YouTubeUploader':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.close()

    async def upload(
        self,
        file_path: Union[str, Path],
        metadata: Union[VideoMetadata, Mapping[str, Any]],
        progress_callback: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload or resume a file.

        Args:
            file_path: Source file
            metadata: Resource metadata for a new session
            progress_callback: Overrides the client-wide callback

        Returns:
            Upload result

        Raises:
            UploaderException: Any configuration, protocol or upload failure
        """
        coordinator = UploadCoordinator(
            self._transport,
            config=self._config,
            session_store=self._store,
            progress_callback=progress_callback or self._progress_callback
        )
        return await coordinator.upload(file_path, metadata)

    async def check(self, file_path: Union[str, Path]) -> Optional[UploadProgress]:
        """
        Report how much of a persisted session the server holds.

        Args:
            file_path: Source file whose side-car should be checked

        Returns:
            Progress, or None if there is no session for the file

        Raises:
            UploadFailedError: If the status probe fails
        """
        session = self._store.open(Path(file_path))
        if session is None:
            return None

        result = await ProgressProber(self._transport, self._config.timeout).probe(session)
        if isinstance(result, ProbeError):
            raise UploadFailedError(
                f"Error checking session progress: {result.error}",
                outcome=result,
                state=UploadState.PROBING
            )
        if isinstance(result, ProbeComplete):
            return UploadProgress(session.size, session.size)
        return UploadProgress(result.next_byte, session.size)

    def has_session(self, file_path: Union[str, Path]) -> bool:
        return self._store.exists(Path(file_path))

    async def find_playlist(self, title: str) -> Optional[Playlist]:
        """Find one of the caller's playlists by title."""
        return await self._playlists.find_by_title(title)

    async def add_to_playlist(self, playlist_id: str, video_id: str) -> Dict[str, Any]:
        """Add an uploaded video to a playlist."""
        return await self._playlists.add_video(playlist_id, video_id)
