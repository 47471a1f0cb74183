"""Transport errors and their classification."""
from .network_errors import (
    NetworkErrorKind,
    TransportError,
    classify_network_error,
    RESET_ERRNOS
)

__all__ = [
    'NetworkErrorKind',
    'TransportError',
    'classify_network_error',
    'RESET_ERRNOS',
]
