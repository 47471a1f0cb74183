"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import AsyncIterator, Optional, Tuple, Union

from ...exceptions import ConfigurationError
from ...logging import get_logger


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            ConfigurationError: If the file is missing, not a regular file or unreadable
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise ConfigurationError(f"File not found: {path}")

        if not path.is_file():
            raise ConfigurationError(f"Path is not a file: {path}")

        try:
            file_size = path.stat().st_size
            with open(path, 'rb'):
                pass
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}")

        return path, file_size

    def validate_size(self, file_size: int, max_size: Optional[int] = None) -> None:
        """
        Validate file size.

        Raises:
            ConfigurationError: If file is empty or exceeds max size
        """
        if file_size == 0:
            raise ConfigurationError("Cannot upload empty file")

        if max_size and file_size > max_size:
            raise ConfigurationError(
                f"File size {file_size} exceeds maximum {max_size}"
            )


class AsyncFileReader:
    """
    Streams a byte range of an open aiofiles handle.

    The handle is owned by the caller; the reader only pulls chunks from
    the current position.
    """

    DEFAULT_CHUNK_SIZE = 256 * 1024

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._chunk_size = chunk_size
        self._logger = get_logger('youtubeup.upload.file')

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def iter_range(self, handle, length: int) -> AsyncIterator[bytes]:
        """
        Yield up to `length` bytes from the handle's current position.

        Stops early if the file is shorter than expected.
        """
        remaining = length
        while remaining > 0:
            data = await handle.read(min(self._chunk_size, remaining))
            if not data:
                self._logger.warning(f"Source ended with {remaining} bytes still expected")
                return
            remaining -= len(data)
            yield data
