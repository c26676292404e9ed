"""
PDF text extraction

Turns the raw bytes of an uploaded report into linear plain text.

CONSTRAINTS:
- Deterministic: same bytes → same text
- Isolated: no LLM, no DB writes
- No layout: pages are joined in order, one text block per page
"""

import io
import logging

from pypdf import PasswordType, PdfReader

from llmquiz.errors import ExtractionError

# pypdf is chatty about malformed xref tables it can recover from
logging.getLogger("pypdf").setLevel(logging.ERROR)

log = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


class PdfTextExtractor:
    """
    Extracts plain text from PDF documents using pypdf.
    """

    def extract(self, document_bytes: bytes) -> str:
        """
        Extract the text of every page, in page order.

        Args:
            document_bytes: Raw bytes of the PDF file

        Returns:
            Page texts joined by newlines

        Raises:
            ExtractionError: Not a PDF, corrupt, encrypted, or without a text layer
        """
        if not document_bytes:
            raise ExtractionError("Empty document: no bytes to extract text from")

        # Some writers prepend junk before the header; pypdf tolerates up to 1 KiB
        if PDF_MAGIC not in document_bytes[:1024]:
            raise ExtractionError("Not a PDF document (missing %PDF- header)")

        try:
            reader = PdfReader(io.BytesIO(document_bytes))
            if reader.is_encrypted and reader.decrypt("") == PasswordType.NOT_DECRYPTED:
                raise ExtractionError("PDF is encrypted and cannot be opened")

            texts = []
            for page in reader.pages:
                t = page.extract_text()
                if t and t.strip():
                    texts.append(t.strip())
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"PDF extraction failed: {e}") from e

        if not texts:
            raise ExtractionError("PDF contains no extractable text")

        text = "\n".join(texts)
        log.info("Extracted %s chars from %s page(s)", len(text), len(texts))
        return text
