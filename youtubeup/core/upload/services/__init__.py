"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader
from .probe_service import ProgressProber, parse_range_header, RESUME_INCOMPLETE
from .transfer_service import TransferExecutor

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'ProgressProber',
    'parse_range_header',
    'RESUME_INCOMPLETE',
    'TransferExecutor',
]
