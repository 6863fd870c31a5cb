"""Browse a directory tree over HTTP, rendering Markdown files as HTML."""

from .app import create_app
from .resolver import ServerRoot

__version__ = "0.1.0"

__all__ = ["create_app", "ServerRoot", "__version__"]
