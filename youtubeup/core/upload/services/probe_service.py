"""
Progress probe service.

Asks the server how much of an open session it has stored.
"""
import re
from typing import Optional

from ...api.config import TimeoutConfig
from ...api.errors import TransportError
from ...api.transport import Transport, TransportRequest
from ...exceptions import ProtocolError, RangeHeaderError
from ...logging import get_logger
from ...session import UploadSession
from ..models import ProbeComplete, ProbeError, ProbeOffset, ProbeResult


RESUME_INCOMPLETE = 308

RANGE_PATTERN = re.compile(r'^\s*bytes=0-(\d+)\s*$')


def parse_range_header(header: Optional[str], total_size: int) -> int:
    """
    Parse a `Range: bytes=0-<n>` header.

    Args:
        header: Raw header value (None if absent)
        total_size: Declared size of the upload

    Returns:
        Zero-based index of the last stored byte

    Raises:
        RangeHeaderError: If the header is absent, malformed or out of bounds
    """
    if header is None:
        raise RangeHeaderError(None)

    match = RANGE_PATTERN.match(header)
    if match is None:
        raise RangeHeaderError(header)

    last_byte = int(match.group(1))
    if last_byte >= total_size:
        raise RangeHeaderError(header)

    return last_byte


class ProgressProber:
    """
    Issues zero-length status requests against a session.

    Never raises for network or protocol failures: every outcome comes
    back as a ProbeResult.

    Example:
        >>> prober = ProgressProber(transport)
        >>> result = await prober.probe(session)
        >>> if isinstance(result, ProbeOffset):
        ...     print(f"resume at byte {result.next_byte}")
    """

    def __init__(self, transport: Transport, timeout: Optional[TimeoutConfig] = None):
        self._transport = transport
        self._timeout = timeout or TimeoutConfig()
        self._logger = get_logger('youtubeup.upload.probe')

    async def probe(self, session: UploadSession) -> ProbeResult:
        """
        Check how many bytes the server holds.

        Args:
            session: Open upload session

        Returns:
            ProbeOffset, ProbeComplete or ProbeError
        """
        request = TransportRequest(
            'PUT',
            session.url,
            headers={
                'Content-Range': f'bytes */{session.size}',
                'Content-Length': '0',
            },
            body=b'',
            timeout=self._timeout.to_probe_timeout()
        )

        try:
            response = await self._transport.send(request)
        except TransportError as e:
            self._logger.debug(f"Probe failed ({e.kind.value}): {e.cause!r}")
            return ProbeError(error=e, kind=e.kind)

        if response.status == RESUME_INCOMPLETE:
            try:
                offset = parse_range_header(response.header('Range'), session.size)
            except RangeHeaderError as e:
                self._logger.warning(str(e))
                return ProbeError(error=e)
            self._logger.debug(f"Server has bytes 0-{offset} of {session.size}")
            return ProbeOffset(offset)

        if response.status in (200, 201):
            self._logger.debug("Server reports upload complete")
            return ProbeComplete()

        error = ProtocolError.from_response('Status probe', response.status, response.text())
        self._logger.warning(str(error))
        return ProbeError(error=error)

