from __future__ import annotations

from .decoder import SUPPORTED_EXTENSIONS, decode_spreadsheet, is_supported_file
from .upload import UploadService

__all__ = ["SUPPORTED_EXTENSIONS", "UploadService", "decode_spreadsheet", "is_supported_file"]
