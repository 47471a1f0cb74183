"""
Data models for upload module.

Probe results and transfer outcomes are immutable values: they are the
only things that travel between the transfer task, the progress poller
and the coordinator loop.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ...api.errors import NetworkErrorKind


PRIVACY_STATUSES = ('public', 'unlisted', 'private')


@dataclass
class VideoMetadata:
    """
    Resource metadata sent when a session is opened.

    Attributes:
        title: Video title
        description: Video description
        tags: Video tags
        privacy_status: One of public, unlisted, private
        category_id: Optional numeric category
        embeddable: Optional embeddable flag
        license: Optional license name

    Example:
        >>> VideoMetadata(title="Talk", tags=["python"]).to_dict()
        {'snippet': {'title': 'Talk', 'tags': ['python']}, 'status': {'privacyStatus': 'public'}}
    """
    title: str = ''
    description: str = ''
    tags: List[str] = field(default_factory=list)
    privacy_status: str = 'public'
    category_id: Optional[int] = None
    embeddable: Optional[bool] = None
    license: Optional[str] = None

    def __post_init__(self):
        if self.privacy_status not in PRIVACY_STATUSES:
            raise ValueError(
                f"privacy_status must be one of {', '.join(PRIVACY_STATUSES)}, "
                f"got {self.privacy_status!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the snippet/status payload."""
        snippet: Dict[str, Any] = {'title': self.title}
        if self.description:
            snippet['description'] = self.description
        if self.tags:
            snippet['tags'] = list(self.tags)
        if self.category_id is not None:
            snippet['categoryId'] = str(self.category_id)

        status: Dict[str, Any] = {'privacyStatus': self.privacy_status}
        if self.embeddable is not None:
            status['embeddable'] = self.embeddable
        if self.license:
            status['license'] = self.license

        return {'snippet': snippet, 'status': status}


@dataclass(frozen=True)
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        bytes_confirmed: Bytes the server has acknowledged
        total_bytes: Total file size
    """
    bytes_confirmed: int
    total_bytes: int

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.total_bytes == 0:
            return 0.0
        return (self.bytes_confirmed / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        return self.bytes_confirmed >= self.total_bytes


class UploadState(str, Enum):
    """Coordinator states."""

    IDLE = 'idle'
    PROBING = 'probing'
    TRANSFERRING = 'transferring'
    RETRYING = 'retrying'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.SUCCEEDED, UploadState.FAILED)


@dataclass(frozen=True)
class ProbeOffset:
    """Server has bytes 0..offset; the next byte to send is offset + 1."""
    offset: int

    @property
    def next_byte(self) -> int:
        return self.offset + 1


@dataclass(frozen=True)
class ProbeComplete:
    """The upload was already finalized."""


@dataclass(frozen=True)
class ProbeError:
    """
    The probe failed.

    Attributes:
        error: Underlying exception
        kind: Network failure kind, or None for protocol errors
    """
    error: Exception
    kind: Optional[NetworkErrorKind] = None


ProbeResult = Union[ProbeOffset, ProbeComplete, ProbeError]


@dataclass(frozen=True)
class TransferSuccess:
    """The remote resource was finalized."""
    resource: Dict[str, Any]


@dataclass(frozen=True)
class TransientFailure:
    """A network-level failure; may be retried."""
    kind: NetworkErrorKind
    error: Exception


@dataclass(frozen=True)
class FatalFailure:
    """A rejection or local failure; never retried."""
    error: Exception


TransferOutcome = Union[TransferSuccess, TransientFailure, FatalFailure]


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a finished upload.

    Attributes:
        state: Terminal state (always SUCCEEDED)
        resource: Remote resource, None if the upload was already complete
        resumed: True if an existing session was continued
        attempts: Number of transfer attempts made in this run
    """
    state: UploadState
    resource: Optional[Dict[str, Any]] = None
    resumed: bool = False
    attempts: int = 0

    @property
    def already_complete(self) -> bool:
        """True if the server reported completion before any transfer."""
        return self.resource is None

    @property
    def video_id(self) -> Optional[str]:
        if self.resource is None:
            return None
        return self.resource.get('id')
