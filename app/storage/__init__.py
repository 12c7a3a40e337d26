"""Durable document storage backends.

Files:
  protocol.py  — DocumentStorage protocol consumed by the document stage
  local.py     — Local filesystem implementation (default)
"""

from app.storage.local import LocalFileStorage
from app.storage.protocol import DocumentStorage

__all__ = ["DocumentStorage", "LocalFileStorage"]
