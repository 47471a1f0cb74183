"""
Transfer service.

Sends the remaining bytes of a source file in one streamed PUT.
"""
import time
from pathlib import Path
from typing import Optional

import aiofiles

from ...api.config import UploaderConfig
from ...api.errors import TransportError
from ...api.transport import Transport, TransportRequest
from ...exceptions import ProtocolError
from ...logging import get_logger
from ...session import UploadSession
from ..models import FatalFailure, TransferOutcome, TransferSuccess, TransientFailure
from .file_service import AsyncFileReader


class TransferExecutor:
    """
    Performs one transfer attempt for a session.

    Responsibilities:
    - Open the source file fresh and seek to the resume offset
    - Stream the rest of the file with the right range headers
    - Turn the response into a TransferOutcome

    There is no chunking below the attempt: a dropped connection needs a
    new probe and a new attempt from the coordinator.
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[UploaderConfig] = None,
        file_reader: Optional[AsyncFileReader] = None
    ):
        self._transport = transport
        self._config = config or UploaderConfig.default()
        self._reader = file_reader or AsyncFileReader(self._config.chunk_size)
        self._logger = get_logger('youtubeup.upload.transfer')

    def build_headers(self, session: UploadSession, start_offset: int) -> dict:
        """
        Headers for a transfer starting at `start_offset`.

        A fresh upload declares only the length. A resumed one adds a
        Content-Range for the remaining bytes, and a resume with nothing
        left to send finalizes with `bytes */<size>`.
        """
        size = session.size
        remaining = max(size - start_offset, 0)
        headers = {
            'Content-Type': self._config.content_type,
            'Content-Length': str(remaining),
        }
        if start_offset > 0:
            if remaining:
                headers['Content-Range'] = f'bytes {start_offset}-{size - 1}/{size}'
            else:
                headers['Content-Range'] = f'bytes */{size}'
        return headers

    async def transfer(
        self,
        session: UploadSession,
        file_path: Path,
        start_offset: int = 0
    ) -> TransferOutcome:
        """
        Upload `file_path` from `start_offset` to the end.

        Args:
            session: Open upload session
            file_path: Source file
            start_offset: First byte to send (0 for a fresh upload)

        Returns:
            TransferSuccess with the finalized resource, TransientFailure for
            network errors, FatalFailure for anything else
        """
        size = session.size
        if start_offset < 0 or start_offset > size:
            return FatalFailure(ValueError(f"Start offset {start_offset} outside 0..{size}"))

        remaining = size - start_offset
        headers = self.build_headers(session, start_offset)

        try:
            handle = await aiofiles.open(file_path, 'rb')
        except OSError as e:
            self._logger.error(f"Cannot open {file_path}: {e}")
            return FatalFailure(e)

        upload_start = time.time()
        self._logger.info(f"Uploading bytes {start_offset}-{size - 1} of {size}")

        try:
            await handle.seek(start_offset)
            body = self._reader.iter_range(handle, remaining) if remaining else b''
            response = await self._transport.send(TransportRequest(
                'PUT',
                session.url,
                headers=headers,
                body=body,
                timeout=self._config.timeout.to_aiohttp_timeout()
            ))
        except TransportError as e:
            elapsed = time.time() - upload_start
            self._logger.warning(f"Transfer interrupted after {elapsed:.1f}s ({e.kind.value}): {e.cause!r}")
            return TransientFailure(kind=e.kind, error=e)
        except OSError as e:
            self._logger.error(f"Cannot read {file_path}: {e}")
            return FatalFailure(e)
        finally:
            await handle.close()

        elapsed = time.time() - upload_start
        if response.status not in (200, 201):
            error = ProtocolError.from_response('Upload', response.status, response.text())
            self._logger.error(f"{error} after {elapsed:.1f}s")
            return FatalFailure(error)

        try:
            resource = response.json()
        except ValueError as e:
            return FatalFailure(ProtocolError(
                f"Upload finished but the response is not JSON: {e}",
                status=response.status,
                body=response.text()
            ))

        speed_kbps = (remaining / 1024 / elapsed) if elapsed > 0 else 0
        self._logger.info(f"Transfer finished in {elapsed:.1f}s ({speed_kbps:.1f} KB/s)")
        return TransferSuccess(resource if isinstance(resource, dict) else {'response': resource})
