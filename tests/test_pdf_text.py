from __future__ import annotations

import io

import pytest

from llmquiz.errors import ExtractionError
from llmquiz.ingestion import PdfTextExtractor


def test_extracts_pages_in_order(make_pdf):
    pdf = make_pdf(["Water boils at 100C.", "Ice melts at 0C."])
    text = PdfTextExtractor().extract(pdf)

    assert "Water boils at 100C." in text
    assert "Ice melts at 0C." in text
    assert text.index("Water") < text.index("Ice")


def test_rejects_non_pdf_bytes():
    with pytest.raises(ExtractionError, match="Not a PDF"):
        PdfTextExtractor().extract(b"PK\x03\x04 this is a zip file")


def test_rejects_empty_input():
    with pytest.raises(ExtractionError):
        PdfTextExtractor().extract(b"")


def test_rejects_corrupt_pdf():
    with pytest.raises(ExtractionError):
        PdfTextExtractor().extract(b"%PDF-1.4\n%garbage without any objects or trailer")


def test_rejects_pdf_without_text(make_pdf):
    pdf = make_pdf([""])
    with pytest.raises(ExtractionError, match="no extractable text"):
        PdfTextExtractor().extract(pdf)


def test_rejects_password_protected_pdf(make_pdf):
    from pypdf import PdfReader, PdfWriter

    writer = PdfWriter()
    for page in PdfReader(io.BytesIO(make_pdf(["Secret report"]))).pages:
        writer.add_page(page)
    writer.encrypt(user_password="s3cret", algorithm="RC4-128")
    buf = io.BytesIO()
    writer.write(buf)

    with pytest.raises(ExtractionError, match="encrypted"):
        PdfTextExtractor().extract(buf.getvalue())
