import pytest
from docx import Document

from resume_match.helpers.parsing import clean_text, extract_text, load_folder
from resume_match.utils.exceptions import ProcessingError


@pytest.fixture
def docx_file(tmp_path):
    path = tmp_path / "jane.docx"
    doc = Document()
    doc.add_paragraph("Senior Python Developer")
    doc.add_paragraph("5 years experience")
    doc.save(str(path))
    return path


class TestExtractText:
    """Test cases for document text extraction"""

    def test_txt(self, tmp_path):
        """Plain text is read and whitespace collapsed"""
        path = tmp_path / "resume.txt"
        path.write_text("Hello   World\n\nPython")
        assert extract_text(str(path)) == "Hello World Python"

    def test_docx(self, docx_file):
        """Word paragraphs are joined"""
        assert extract_text(str(docx_file)) == "Senior Python Developer 5 years experience"

    def test_declared_type_wins(self, tmp_path):
        """The declared type overrides the extension"""
        path = tmp_path / "resume.bin"
        path.write_text("Kotlin and Swift")
        assert extract_text(str(path), declared_type="TXT") == "Kotlin and Swift"

    def test_unsupported_format(self, tmp_path):
        """Unknown formats are rejected"""
        path = tmp_path / "resume.rtf"
        path.write_text("{\\rtf1 hello}")

        with pytest.raises(ProcessingError) as exc_info:
            extract_text(str(path))

        assert "Unsupported format" in exc_info.value.message
        assert exc_info.value.error_code == "PROCESSING_ERROR"
        assert exc_info.value.details["document_type"] == "rtf"

    def test_missing_file(self, tmp_path):
        """Missing files are reported as extraction errors"""
        with pytest.raises(ProcessingError) as exc_info:
            extract_text(str(tmp_path / "ghost.txt"))
        assert "Extraction error" in exc_info.value.message

    def test_corrupt_docx(self, tmp_path):
        """Reader failures are wrapped"""
        path = tmp_path / "broken.docx"
        path.write_bytes(b"not a zip archive")

        with pytest.raises(ProcessingError) as exc_info:
            extract_text(str(path))

        assert exc_info.value.message.startswith("Extraction error")
        assert exc_info.value.details == {"document_id": "broken", "document_type": "docx"}
        assert exc_info.value.cause is not None
        assert not isinstance(exc_info.value.cause, ProcessingError)

    def test_clean_text(self):
        """Whitespace runs collapse to single spaces"""
        assert clean_text("  a\t\tb \n c  ") == "a b c"


class TestLoadFolder:
    """Test cases for folder loading"""

    def test_supported_files_only(self, tmp_path, docx_file):
        """Unsupported files are skipped and ids come from file stems"""
        (tmp_path / "adam.txt").write_text("Data analyst, SQL")
        (tmp_path / "photo.png").write_bytes(b"\x89PNG")

        records = load_folder(str(tmp_path))

        assert [r.id for r in records] == ["adam", "jane"]
        assert records[0].text == "Data analyst, SQL"
        assert records[1].path.endswith("jane.docx")

    def test_empty_folder(self, tmp_path):
        """Empty folders yield no records"""
        assert load_folder(str(tmp_path)) == []
