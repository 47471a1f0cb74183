"""
Playlist lookup and association.

Stateless request/response helpers used after an upload finishes.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from yarl import URL

from ..exceptions import ProtocolError
from ..logging import get_logger
from .config import UploaderConfig
from .transport import Transport, TransportRequest, TransportResponse


@dataclass(frozen=True)
class Playlist:
    """A playlist owned by the authenticated channel."""
    id: str
    title: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Playlist':
        return cls(id=data['id'], title=data.get('snippet', {}).get('title', ''))


class PlaylistService:
    """
    Finds playlists by title and adds videos to them.

    Example:
        >>> playlists = PlaylistService(transport)
        >>> playlist = await playlists.find_by_title("Talks")
        >>> await playlists.add_video(playlist.id, video_id)
    """

    PAGE_SIZE = 50

    def __init__(self, transport: Transport, config: Optional[UploaderConfig] = None):
        self._transport = transport
        self._config = config or UploaderConfig.default()
        self._base = URL(self._config.api_url)
        self._logger = get_logger('youtubeup.playlist')

    async def _send(self, action: str, request: TransportRequest) -> TransportResponse:
        response = await self._transport.send(request)
        if not response.ok:
            raise ProtocolError.from_response(action, response.status, response.text())
        return response

    async def find_by_title(self, title: str) -> Optional[Playlist]:
        """
        Find one of the caller's playlists by exact title.

        Args:
            title: Playlist title

        Returns:
            Matching playlist or None

        Raises:
            ProtocolError: If the listing request is rejected
            TransportError: On network failure
        """
        page_token = None
        while True:
            query = {'part': 'snippet', 'mine': 'true', 'maxResults': str(self.PAGE_SIZE)}
            if page_token:
                query['pageToken'] = page_token
            url = (self._base / 'playlists').with_query(query)

            response = await self._send(
                'Playlist lookup',
                TransportRequest(
                    'GET', str(url),
                    timeout=self._config.timeout.to_probe_timeout()
                )
            )
            page = response.json()

            for item in page.get('items', []):
                playlist = Playlist.from_dict(item)
                if playlist.title == title:
                    self._logger.debug(f"Found playlist '{title}': {playlist.id}")
                    return playlist

            page_token = page.get('nextPageToken')
            if not page_token:
                self._logger.debug(f"No playlist titled '{title}'")
                return None

    async def add_video(self, playlist_id: str, video_id: str) -> Dict[str, Any]:
        """
        Append a video to a playlist.

        Returns:
            The created playlist item

        Raises:
            ProtocolError: If the insert is rejected
        """
        url = (self._base / 'playlistItems').with_query({'part': 'snippet'})
        payload = {
            'snippet': {
                'playlistId': playlist_id,
                'resourceId': {'kind': 'youtube#video', 'videoId': video_id},
            }
        }
        response = await self._send(
            'Playlist insert',
            TransportRequest(
                'POST', str(url),
                headers={'Content-Type': 'application/json; charset=utf-8'},
                body=json.dumps(payload).encode('utf-8'),
                timeout=self._config.timeout.to_probe_timeout()
            )
        )
        self._logger.info(f"Added video {video_id} to playlist {playlist_id}")
        return response.json()
