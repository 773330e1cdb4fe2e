import io

import pytest
from docx import Document

from errors import ExtractionError, UnsupportedFormatError
from services.document_parser import extract_text


def _docx_bytes(*paragraphs: str) -> bytes:
    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def test_extract_docx():
    text = extract_text(_docx_bytes("Jane Doe", "Python developer"), "resume.DOCX")
    assert text == "Jane Doe\nPython developer"


def test_unsupported_extension():
    with pytest.raises(UnsupportedFormatError) as exc_info:
        extract_text(b"plain text", "resume.txt")
    assert exc_info.value.status_code == 415
    assert exc_info.value.details["filename"] == "resume.txt"


def test_missing_extension():
    with pytest.raises(UnsupportedFormatError):
        extract_text(b"data", "")


def test_corrupt_pdf():
    with pytest.raises(ExtractionError):
        extract_text(b"not really a pdf", "resume.pdf")


def test_empty_docx():
    with pytest.raises(ExtractionError):
        extract_text(_docx_bytes(), "empty.docx")


HTML_RESUME = b"""<html>
<head><style>h1 { color: navy; }</style><script>trackVisit();</script></head>
<body>
  <h1>Jane Doe</h1>
  <section id="skills"><h2>Skills</h2><ul><li>Python</li><li>Docker</li></ul></section>
</body>
</html>"""


def test_extract_html():
    text = extract_text(HTML_RESUME, "profile.html")
    assert text.splitlines() == ["Jane Doe", "Skills", "Python", "Docker"]


def test_extract_htm_extension():
    assert "Jane Doe" in extract_text(HTML_RESUME, "PROFILE.HTM")


def test_html_without_visible_text():
    with pytest.raises(ExtractionError):
        extract_text(b"<html><body><script>trackVisit();</script></body></html>", "empty.html")
