"""
Upload module for resumable uploads.

One session per source file, one streamed PUT per attempt, and a
coordinator that re-probes the server after every dropped connection.
"""
from .coordinator import UploadCoordinator, ProgressCallback
from .models import (
    VideoMetadata,
    UploadProgress,
    UploadResult,
    UploadState,
    ProbeOffset,
    ProbeComplete,
    ProbeError,
    TransferSuccess,
    TransientFailure,
    FatalFailure
)
from .services import ProgressProber, TransferExecutor, FileValidator, parse_range_header

__all__ = [
    # Main classes
    'UploadCoordinator',
    'ProgressProber',
    'TransferExecutor',
    'FileValidator',
    'parse_range_header',
    'ProgressCallback',

    # Models
    'VideoMetadata',
    'UploadProgress',
    'UploadResult',
    'UploadState',
    'ProbeOffset',
    'ProbeComplete',
    'ProbeError',
    'TransferSuccess',
    'TransientFailure',
    'FatalFailure',
]
