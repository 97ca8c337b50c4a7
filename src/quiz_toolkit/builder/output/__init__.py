"""
Module: builder.output

Purpose:
    Document output. Defines the backend capability interface, the
    ReportLab implementation, and the Document value that replays laid-out
    pages to a PDF file or bytes.

Key Classes:
    - DocumentBackend: Abstract measuring/drawing backend
    - Document: save(), to_bytes(), preview()
    - ConfigurationError: No usable backend

Dependencies:
    - reportlab: PDF generation (loaded lazily by get_default_backend)

Used By:
    - builder.layout.composer: Measurement and Document construction
    - builder.controller: Saving
"""

from .backend import ConfigurationError, DocumentBackend, get_default_backend
from .document import Document, default_filename

__all__ = [
    "ConfigurationError",
    "DocumentBackend",
    "get_default_backend",
    "Document",
    "default_filename",
]
