"""Pytest fixtures for youtubeup tests."""
import asyncio
import hashlib
import json
import re
from typing import List, Optional, Union

import pytest
from multidict import CIMultiDict

from youtubeup.core.api import (
    NetworkErrorKind,
    RetryConfig,
    TransportError,
    TransportRequest,
    TransportResponse,
    UploaderConfig
)


UPLOAD_URL = "https://upload.example.com/upload/videos?uploadType=resumable&part=snippet,status"
SESSION_URL = "https://upload.example.com/upload/videos?upload_id=abc123"


async def read_body(body) -> bytes:
    """Drain a request body the way a transport would."""
    if body is None:
        return b''
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    data = bytearray()
    async for chunk in body:
        data.extend(chunk)
    return bytes(data)


class FakeResumableServer:
    """
    In-memory implementation of the resumable upload protocol.

    Acts as a Transport. Behaviour knobs:
        failures: bytes accepted per data attempt before the connection
            resets (None means the attempt is not interrupted)
        failure_kind: kind raised for injected failures
        upload_status: status returned for data PUTs instead of storing bytes
        chunk_delay: seconds slept per received chunk
    """

    def __init__(self):
        self.requests: List[TransportRequest] = []
        self.size: Optional[int] = None
        self.received = bytearray()
        self.finalized = False
        self.failures: List[Optional[int]] = []
        self.failure_kind = NetworkErrorKind.RESET
        self.upload_status: Optional[int] = None
        self.init_status = 200
        self.chunk_delay = 0.0
        self.data_attempts: List[int] = []
        self.session_url = SESSION_URL

    def open_session(self, size: int, received: bytes = b'') -> str:
        self.size = size
        self.received = bytearray(received)
        return SESSION_URL

    @property
    def resource(self) -> dict:
        return {
            'kind': 'youtube#video',
            'id': 'vid123',
            'sha256': hashlib.sha256(bytes(self.received)).hexdigest(),
        }

    def probes(self) -> List[TransportRequest]:
        """Zero-length status requests."""
        return [r for r in self.requests if r.method == 'PUT' and r.headers.get('Content-Length') == '0']

    def uploads(self) -> List[TransportRequest]:
        """PUT requests that carried file bytes."""
        return [r for r in self.requests if r.method == 'PUT' and r.headers.get('Content-Length') != '0']

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        headers = CIMultiDict(request.headers)

        if request.method == 'POST':
            if self.init_status != 200:
                return TransportResponse.build(self.init_status, body='{"error": "quota"}')
            self.open_session(int(headers['X-Upload-Content-Length']))
            return TransportResponse.build(200, {'Location': SESSION_URL})

        content_range = headers.get('Content-Range')
        if content_range and content_range.startswith('bytes */') and request.body in (b'', None):
            return self._status_response()

        return await self._receive(headers, request.body)

    def _status_response(self) -> TransportResponse:
        if self.finalized:
            return TransportResponse.build(200, {'Content-Type': 'application/json'}, json.dumps(self.resource))
        if not self.received:
            return TransportResponse.build(308)
        return TransportResponse.build(308, {'Range': f'bytes=0-{len(self.received) - 1}'})

    async def _receive(self, headers, body) -> TransportResponse:
        if self.upload_status is not None:
            return TransportResponse.build(self.upload_status, body='{"error": "forbidden"}')

        start = 0
        content_range = headers.get('Content-Range')
        if content_range:
            match = re.match(r'bytes (\d+)-(\d+)/(\d+)', content_range)
            start = int(match.group(1))
        if start != len(self.received):
            return TransportResponse.build(400, body=f'expected byte {len(self.received)}, got {start}')

        self.data_attempts.append(start)
        limit = self.failures.pop(0) if self.failures else None
        accepted = 0

        if isinstance(body, (bytes, bytearray)):
            chunks = [bytes(body)]
        else:
            chunks = body

        async def consume():
            nonlocal accepted
            if isinstance(chunks, list):
                for chunk in chunks:
                    yield chunk
            else:
                async for chunk in chunks:
                    yield chunk

        async for chunk in consume():
            if self.chunk_delay:
                await asyncio.sleep(self.chunk_delay)
            if limit is not None and accepted + len(chunk) > limit:
                self.received.extend(chunk[:limit - accepted])
                raise TransportError(self.failure_kind, ConnectionResetError('connection reset by peer'))
            self.received.extend(chunk)
            accepted += len(chunk)

        if limit is not None and accepted >= limit:
            raise TransportError(self.failure_kind, ConnectionResetError('connection reset by peer'))

        if len(self.received) == self.size:
            self.finalized = True
            return TransportResponse.build(201, {'Content-Type': 'application/json'}, json.dumps(self.resource))
        return self._status_response()


class ScriptedTransport:
    """Transport that replays scripted responses or exceptions in order."""

    def __init__(self, *script: Union[TransportResponse, Exception]):
        self.script = list(script)
        self.requests: List[TransportRequest] = []
        self.bodies: List[bytes] = []

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        self.bodies.append(await read_body(request.body))
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def server():
    """Fake resumable upload server."""
    return FakeResumableServer()


@pytest.fixture
def scripted():
    """Factory for scripted transports."""
    return ScriptedTransport


@pytest.fixture
def fast_config():
    """Config with tiny intervals so coordinator tests run quickly."""
    return UploaderConfig(
        upload_url=UPLOAD_URL,
        chunk_size=100,
        retry=RetryConfig(poll_interval=0.01, retry_delay=0.0)
    )


@pytest.fixture
def video_bytes():
    """1000 bytes of deterministic content."""
    return bytes(i % 251 for i in range(1000))


@pytest.fixture
def video_file(tmp_path, video_bytes):
    """A 1000-byte source file."""
    path = tmp_path / "talk.mp4"
    path.write_bytes(video_bytes)
    return path
