"""Tests for playlist lookup and association."""
import json

import pytest

from youtubeup.core.api import Playlist, PlaylistService, TransportResponse, UploaderConfig
from youtubeup.core.exceptions import ProtocolError


CONFIG = UploaderConfig(api_url="https://api.example.com/youtube/v3/")


def page(items, next_token=None):
    data = {'items': [{'id': pid, 'snippet': {'title': title}} for pid, title in items]}
    if next_token:
        data['nextPageToken'] = next_token
    return TransportResponse.build(200, body=json.dumps(data))


class TestPlaylist:
    """Tests for Playlist model."""

    def test_from_dict(self):
        playlist = Playlist.from_dict({'id': 'PL1', 'snippet': {'title': 'Talks'}})

        assert playlist == Playlist('PL1', 'Talks')


class TestFindByTitle:
    """Tests for PlaylistService.find_by_title."""

    @pytest.mark.asyncio
    async def test_finds_on_first_page(self, scripted):
        transport = scripted(page([('PL1', 'Music'), ('PL2', 'Talks')]))

        playlist = await PlaylistService(transport, CONFIG).find_by_title('Talks')

        assert playlist == Playlist('PL2', 'Talks')
        request = transport.requests[0]
        assert request.method == 'GET'
        assert request.url.startswith("https://api.example.com/youtube/v3/playlists?")
        assert 'mine=true' in request.url
        assert 'maxResults=50' in request.url

    @pytest.mark.asyncio
    async def test_follows_page_tokens(self, scripted):
        """Test later pages are requested with the page token."""
        transport = scripted(
            page([('PL1', 'Music')], next_token='NEXT'),
            page([('PL9', 'Talks')])
        )

        playlist = await PlaylistService(transport, CONFIG).find_by_title('Talks')

        assert playlist.id == 'PL9'
        assert 'pageToken=NEXT' in transport.requests[1].url

    @pytest.mark.asyncio
    async def test_title_must_match_exactly(self, scripted):
        transport = scripted(page([('PL1', 'talks'), ('PL2', 'Talks 2024')]))

        assert await PlaylistService(transport, CONFIG).find_by_title('Talks') is None

    @pytest.mark.asyncio
    async def test_not_found(self, scripted):
        """Test None after the last page."""
        transport = scripted(page([], next_token='A'), page([]))

        assert await PlaylistService(transport, CONFIG).find_by_title('Talks') is None
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_rejected_listing(self, scripted):
        transport = scripted(TransportResponse.build(401, body='unauthorized'))

        with pytest.raises(ProtocolError) as exc_info:
            await PlaylistService(transport, CONFIG).find_by_title('Talks')

        assert exc_info.value.status == 401


class TestAddVideo:
    """Tests for PlaylistService.add_video."""

    @pytest.mark.asyncio
    async def test_add_video_payload(self, scripted):
        """Test the playlist item insert payload."""
        transport = scripted(TransportResponse.build(200, body='{"id": "item1"}'))

        item = await PlaylistService(transport, CONFIG).add_video('PL1', 'vid123')

        assert item == {'id': 'item1'}
        request = transport.requests[0]
        assert request.method == 'POST'
        assert request.url == "https://api.example.com/youtube/v3/playlistItems?part=snippet"
        assert json.loads(transport.bodies[0]) == {
            'snippet': {
                'playlistId': 'PL1',
                'resourceId': {'kind': 'youtube#video', 'videoId': 'vid123'},
            }
        }

    @pytest.mark.asyncio
    async def test_add_video_rejected(self, scripted):
        transport = scripted(TransportResponse.build(404, body='playlistNotFound'))

        with pytest.raises(ProtocolError):
            await PlaylistService(transport, CONFIG).add_video('PL1', 'vid123')
