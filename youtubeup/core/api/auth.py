"""
Credentials for the authenticated transport.

Obtaining and refreshing OAuth tokens is somebody else's job; this module
only turns an already issued access token into an Authorization header.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from ..exceptions import ConfigurationError


DEFAULT_TOKEN_FILE = Path.home() / '.credentials' / 'youtube-up.json'


@runtime_checkable
class Credentials(Protocol):
    """Protocol for objects that authorize outgoing requests."""

    def authorization_header(self) -> str:
        """Returns the value of the Authorization header."""
        ...


@dataclass(frozen=True)
class BearerCredentials:
    """
    Static bearer token.

    Attributes:
        access_token: OAuth access token
        token_type: Token type, normally 'Bearer'
    """
    access_token: str
    token_type: str = 'Bearer'

    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"

    @classmethod
    def from_token_file(cls, path: Union[str, Path] = DEFAULT_TOKEN_FILE) -> 'BearerCredentials':
        """
        Load a cached token written by an OAuth client.

        Args:
            path: JSON file with at least an 'access_token' field

        Raises:
            ConfigurationError: If the file is missing or has no token
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except FileNotFoundError:
            raise ConfigurationError(f"Token file not found: {path}")
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Unable to read token file {path}: {e}")

        token = data.get('access_token') if isinstance(data, dict) else None
        if not token:
            raise ConfigurationError(f"Token file {path} has no access_token")

        # Some token caches store a lowercase 'bearer'
        token_type = str(data.get('token_type') or 'Bearer')
        return cls(access_token=token, token_type=token_type.capitalize())
