"""Ready-made handlers and handler wrappers.

Both are plain functions over handlers; combine them with ``routes()`` or
``compose()`` like any other handler.
"""

from paperplane.handlers.cors import CORSConfig, cors
from paperplane.handlers.static import serve

__all__ = ["CORSConfig", "cors", "serve"]
