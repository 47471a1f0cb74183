"""
Session data models.

Contains the persisted identity of one resumable upload.
"""
from dataclasses import dataclass
from typing import Any, Dict
import json


@dataclass(frozen=True)
class UploadSession:
    """
    Identity of one in-progress or completable upload.
    
    Attributes:
        url: Server-assigned resumable upload URL, stable for the life of the upload
        size: Declared byte length of the source file
    """
    url: str
    size: int
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.
        
        Returns:
            Dictionary representation
        """
        return {'url': self.url, 'size': self.size}
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadSession':
        """
        Create from dictionary.
        
        Unknown keys are ignored so newer files still load.
        
        Raises:
            KeyError: If a required key is missing
            ValueError: If size is not an integer
        """
        size = data['size']
        if isinstance(size, bool) or not isinstance(size, int):
            raise ValueError(f"Session size must be an integer, got {size!r}")
        return cls(url=str(data['url']), size=size)
    
    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())
    
    @classmethod
    def from_json(cls, json_str: str) -> 'UploadSession':
        """Create from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ValueError("Session JSON must be an object")
        return cls.from_dict(data)
    
    def is_valid(self) -> bool:
        """
        Check if session data is valid.
        
        Returns:
            True if the URL is non-empty and the size positive
        """
        return bool(self.url) and self.size > 0
