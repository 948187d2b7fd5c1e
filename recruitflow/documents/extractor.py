"""Turn uploaded resumes and cover letters into oracle-ready payloads.

DOCX text goes through python-docx, PDF text through pymupdf (optional
dependency). Everything the extraction oracle can read natively (plain
text, PDF, images) is passed through untouched for resumes.
"""

import io
import logging

from docx import Document

from recruitflow.core.schemas import DOC_MIME_TYPE, DOCX_MIME_TYPE, ResumePayload, UploadedFile

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"


class DocumentError(ValueError):
    """Base class for document normalization failures."""


class UnsupportedDocumentError(DocumentError):
    """The file format has no extraction path."""


class DocumentExtractionError(DocumentError):
    """Text extraction from a supported format failed."""


def extract_text_from_docx(data: bytes) -> str:
    """Extract paragraph text from DOCX bytes."""
    doc = Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def _import_pymupdf():  # type: ignore[no-untyped-def]
    try:
        import pymupdf
    except ImportError:
        msg = (
            "pymupdf is required for PDF extraction. "
            "Install with: pip install 'recruitflow[pdf]'"
        )
        raise ImportError(msg) from None
    return pymupdf


def extract_text_from_pdf_bytes(data: bytes) -> str:
    """Extract plain text from in-memory PDF bytes."""
    pymupdf = _import_pymupdf()
    doc = pymupdf.open(stream=data, filetype="pdf")
    text_parts: list[str] = []
    for page in doc:
        text_parts.append(page.get_text())
    doc.close()
    return "\n".join(text_parts)


def normalize_resume(resume: UploadedFile) -> ResumePayload:
    """Convert a resume upload into the extraction oracle's input.

    Raises:
        UnsupportedDocumentError: For legacy .doc files.
        DocumentExtractionError: If DOCX text extraction fails.
    """
    if resume.content_type == DOCX_MIME_TYPE:
        try:
            text = extract_text_from_docx(resume.data)
        except Exception as e:
            logger.error("Error extracting text from resume DOCX '%s'", resume.name, exc_info=True)
            msg = f"Failed to extract text from resume DOCX document: {e}"
            raise DocumentExtractionError(msg) from e
        return ResumePayload(content_type=TEXT_MIME_TYPE, data=text.encode("utf-8"))

    if resume.content_type == DOC_MIME_TYPE:
        logger.warning("Resume '%s' is a legacy .doc file; no extraction path", resume.name)
        msg = (
            "Direct processing of .doc resume files is not supported. "
            "Please convert to .docx, PDF, or TXT."
        )
        raise UnsupportedDocumentError(msg)

    return ResumePayload(content_type=resume.content_type, data=resume.data)


def normalize_cover_letter(cover_letter: UploadedFile) -> str:
    """Return cover-letter text, or a placeholder naming the file.

    Never raises: a cover letter that cannot be read degrades to a note.
    """
    name = cover_letter.name
    content_type = cover_letter.content_type

    if content_type == DOCX_MIME_TYPE:
        try:
            return extract_text_from_docx(cover_letter.data)
        except Exception:
            logger.warning("Could not extract text from cover letter DOCX '%s'", name, exc_info=True)
            return "Cover letter provided as DOCX, but text extraction failed."

    if content_type == TEXT_MIME_TYPE:
        return cover_letter.data.decode("utf-8", errors="replace")

    if content_type == PDF_MIME_TYPE:
        try:
            return extract_text_from_pdf_bytes(cover_letter.data)
        except Exception:
            logger.warning("Could not extract text from cover letter PDF '%s'", name, exc_info=True)
            return f"Cover letter provided as a PDF file ({name}). Content not directly extracted in this step."

    if content_type == DOC_MIME_TYPE:
        logger.warning("Cover letter '%s' is a legacy .doc file; passing a placeholder", name)
        return (
            f"Cover letter provided as a .doc file ({name}). Content not extracted. "
            "Please use .docx, .txt or .pdf."
        )

    logger.warning("Unsupported cover letter file type: %s; passing a placeholder", content_type)
    return (
        f"Cover letter provided as {name} (type: {content_type}), "
        "but its content could not be extracted as text in this step."
    )
