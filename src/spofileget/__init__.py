"""spofileget - Get SharePoint Online files through the SharePoint REST API."""

from .client import SharePointClient
from .exceptions import (
    AuthenticationError,
    DownloadError,
    FileNotFoundError,
    RequestError,
    SharePointError,
    ValidationError,
)
from .retrieval import (
    AsString,
    FileById,
    FileByUrl,
    FileRetrieval,
    ListItem,
    Metadata,
    SaveToFile,
    build_request_url,
    validate_options,
)
from .utils import format_output, format_size

__version__ = "1.0.0"
__all__ = [
    # Client
    "SharePointClient",
    # Requests
    "FileRetrieval",
    "FileById",
    "FileByUrl",
    "Metadata",
    "AsString",
    "ListItem",
    "SaveToFile",
    "build_request_url",
    "validate_options",
    # Exceptions
    "SharePointError",
    "ValidationError",
    "AuthenticationError",
    "FileNotFoundError",
    "RequestError",
    "DownloadError",
    # Utils
    "format_output",
    "format_size",
]
