"""Upload models."""
from .upload_models import (
    VideoMetadata,
    UploadProgress,
    UploadState,
    ProbeOffset,
    ProbeComplete,
    ProbeError,
    ProbeResult,
    TransferSuccess,
    TransientFailure,
    FatalFailure,
    TransferOutcome,
    UploadResult,
    PRIVACY_STATUSES
)

__all__ = [
    'VideoMetadata',
    'UploadProgress',
    'UploadState',
    'ProbeOffset',
    'ProbeComplete',
    'ProbeError',
    'ProbeResult',
    'TransferSuccess',
    'TransientFailure',
    'FatalFailure',
    'TransferOutcome',
    'UploadResult',
    'PRIVACY_STATUSES',
]
