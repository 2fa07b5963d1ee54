"""Document sources and the loader that feeds the renderers."""

from .base import DocumentSource, Response, unwrap_response
from .file_source import FileDocumentSource
from .http_source import HttpDocumentSource
from .loader import Failed, Loader, LoadState, Pending, Ready, render_state

__all__ = [
    "DocumentSource",
    "Response",
    "unwrap_response",
    "FileDocumentSource",
    "HttpDocumentSource",
    "Failed",
    "Loader",
    "LoadState",
    "Pending",
    "Ready",
    "render_state",
]
