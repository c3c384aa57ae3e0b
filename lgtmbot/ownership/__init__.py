"""Ownership file decoding."""

from __future__ import annotations

from .decoder import OWNERS_FILE_NAME, decode_ownership_file
from .models import OwnersFile

__all__ = ["OWNERS_FILE_NAME", "OwnersFile", "decode_ownership_file"]
