"""
Ingestion Package

Step 1 of the quiz pipeline: turn an uploaded document into plain text.
Pasted text skips this step entirely.
"""

from .pdf_text import PdfTextExtractor

__all__ = [
    "PdfTextExtractor",
]
