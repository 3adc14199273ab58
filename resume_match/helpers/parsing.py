import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from docx import Document
from pdfminer.high_level import extract_text as pdf_extract

from resume_match.models.models import DocRecord
from resume_match.utils.exceptions import ProcessingError
from resume_match.utils.logging_config import get_logger

logging.getLogger("pdfminer").setLevel(logging.ERROR)
logger = get_logger(__name__)

SUPPORTED_TYPES = ("pdf", "docx", "txt")


def read_txt(p: Path) -> str:
    return p.read_text(errors="ignore")


def read_docx(p: Path) -> str:
    doc = Document(str(p))
    return "\n".join([para.text for para in doc.paragraphs])


def read_pdf(p: Path) -> str:
    try:
        return pdf_extract(str(p))
    except Exception as e:
        logger.warning(f"pdfminer failed on {p.name} ({e}); falling back to unstructured")
        from unstructured.partition.auto import partition
        elems = partition(filename=str(p))
        return "\n".join([el.text for el in elems if hasattr(el, "text") and el.text])


READERS = {"pdf": read_pdf, "docx": read_docx, "txt": read_txt}


def clean_text(x: str) -> str:
    x = re.sub(r'\s+', ' ', x).strip()
    return x


def extract_text(path: str, declared_type: Optional[str] = None) -> str:
    """
    Plain text of a PDF, DOCX or TXT document.

    ``declared_type`` wins over the file extension. Raises ProcessingError
    for unsupported formats and for reader failures.
    """
    p = Path(path)
    doc_type = (declared_type or p.suffix).lower().lstrip(".")
    if doc_type not in READERS:
        raise ProcessingError(
            f"Unsupported format: {doc_type or 'unknown'}",
            document_id=p.stem,
            document_type=doc_type or None,
        )
    if not p.is_file():
        raise ProcessingError(f"Extraction error: file not found: {p}", document_id=p.stem, document_type=doc_type)

    try:
        raw = READERS[doc_type](p)
    except Exception as e:
        logger.error(f"Extraction failed for {p.name} ({doc_type}): {e}")
        raise ProcessingError(
            f"Extraction error: {e}", document_id=p.stem, document_type=doc_type, cause=e
        ) from e
    return clean_text(raw or "")


def load_folder(folder: str) -> List[DocRecord]:
    out = []
    for root, _, files in os.walk(folder):
        for f in sorted(files):
            p = Path(root) / f
            ext = p.suffix.lower().lstrip(".")
            if ext not in READERS:
                continue
            out.append(DocRecord(id=p.stem, path=str(p), text=extract_text(str(p), ext)))
    return out
