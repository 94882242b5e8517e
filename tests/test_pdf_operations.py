import pymupdf as fitz
import pytest

from study_processor.pdf.operations import PDFOperations
from study_processor.utils.exceptions import FileNotFoundError, PDFParsingError


def _make_pdf(path, texts):
    doc = fitz.open()
    for text in texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()
    return path


def test_extract_pages_keeps_numbering(tmp_path):
    pdf = _make_pdf(tmp_path / "book.pdf", ["Chapter one", "", "Chapter two"])
    pages = PDFOperations.extract_pages(str(pdf))

    assert [p.page_number for p in pages] == [1, 2, 3]
    assert pages[0].text == "Chapter one"
    assert pages[1].text == ""
    assert PDFOperations.get_page_count(str(pdf)) == 3


def test_extract_page_range(tmp_path):
    pdf = _make_pdf(tmp_path / "book.pdf", ["a", "b", "c", "d"])
    pages = PDFOperations.extract_pages(str(pdf), 2, 3)
    assert [p.text for p in pages] == ["b", "c"]
    assert PDFOperations.get_page_text(str(pdf), 4) == "d"


def test_invalid_range(tmp_path):
    pdf = _make_pdf(tmp_path / "book.pdf", ["a"])
    with pytest.raises(PDFParsingError):
        PDFOperations.extract_pages(str(pdf), 2, 2)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        PDFOperations.extract_pages(str(tmp_path / "missing.pdf"))


def test_corrupt_file(tmp_path):
    bad = tmp_path / "bad.pdf"
    bad.write_bytes(b"this is not a pdf")
    with pytest.raises(PDFParsingError):
        PDFOperations.get_page_count(str(bad))
