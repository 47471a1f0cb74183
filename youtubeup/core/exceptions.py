"""
Exceptions for resumable upload operations.

Failures inside the probe and transfer services are returned as outcome
values; these exceptions are what the session store, the playlist service
and the coordinator raise to their callers.
"""
from typing import Optional, Any


class UploaderException(Exception):
    """Base exception for all youtubeup errors."""
    
    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status: HTTP status code (if the error came from a response)
            body: Raw response body kept as diagnostic text
        """
        self.status = status
        self.body = body
        super().__init__(message)


class ConfigurationError(UploaderException):
    """Raised for unusable local inputs: source file, upload URL, session size."""
    pass


class ProtocolError(UploaderException):
    """Raised when the remote service answers with an unexpected status."""
    
    @classmethod
    def from_response(cls, action: str, status: int, body: str) -> 'ProtocolError':
        """Build an error that carries the raw response body."""
        detail = body.strip() or '<empty body>'
        return cls(f"{action} failed with HTTP {status}: {detail}", status=status, body=body)


class RangeHeaderError(ProtocolError):
    """Raised when a resume-incomplete response has no usable Range header."""
    
    def __init__(self, header: Optional[str], status: int = 308) -> None:
        self.header = header
        if header is None:
            message = "Resume-incomplete response carried no Range header"
        else:
            message = f"Error parsing range header: {header!r}"
        super().__init__(message, status=status)


class SessionError(UploaderException):
    """Raised when an upload session cannot be opened or created."""
    pass


class UploadFailedError(UploaderException):
    """
    Raised by the coordinator when an upload reaches the failed state.
    
    The side-car session file is left in place so a later run can resume.
    """
    
    def __init__(self, message: str, outcome: Any = None, state: Any = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            outcome: Final probe or transfer outcome that ended the run
            state: Upload state the coordinator was in when it failed
        """
        self.outcome = outcome
        self.state = state
        error = getattr(outcome, 'error', None)
        super().__init__(
            message,
            status=getattr(error, 'status', None),
            body=getattr(error, 'body', None)
        )
