"""
Unit tests for response body writing.
"""

import io
from pathlib import Path

import pytest

from webworker.core.target import FileTarget
from webworker.http import content
from webworker.http.content import (
    ContentWriter,
    NotFoundPageMissing,
    DATE_TAG,
    SERVER_TAG,
    substitute_tags,
)
from webworker.http.content_types import ContentType

from conftest import INDEX_HTML, NOT_FOUND_BODY, PLAIN_HTML


FIXED_DATE = "Thu Jan 15 12:30:45 2026"


@pytest.fixture(autouse=True)
def fixed_date(monkeypatch):
    """Freeze the substituted date."""
    monkeypatch.setattr(content, "format_timestamp", lambda: FIXED_DATE)


@pytest.fixture
def writer(not_found_page: Path) -> ContentWriter:
    return ContentWriter(
        not_found_page=not_found_page,
        server_id="Test Server",
        buffer_size=4096,
    )


def render(writer: ContentWriter, root: Path, path: str, content_type: ContentType) -> bytes:
    out = io.BytesIO()
    with FileTarget.open(root, path) as target:
        writer.write(out, content_type, target.handle)
    return out.getvalue()


class TestSubstituteTags:
    """Tests for placeholder substitution."""

    def test_replaces_every_occurrence(self):
        line = f"{DATE_TAG} {SERVER_TAG} {DATE_TAG}\n".encode()
        assert substitute_tags(line, "srv") == f"{FIXED_DATE} srv {FIXED_DATE}\n".encode()

    def test_line_without_tags_unchanged(self):
        line = b"<p>Hello</p>\r\n"
        assert substitute_tags(line, "srv") is line

    def test_literal_match_only(self):
        """Test that near-misses are left alone."""
        line = b"<server-dates> <SERVER-ID> server-id\n"
        assert substitute_tags(line, "srv") == line

    def test_replacement_is_not_interpreted(self):
        """Test that regex-like replacement text is inserted verbatim."""
        assert substitute_tags(SERVER_TAG.encode(), r"\1 $0") == rb"\1 $0"


class TestTemplateBranch:
    """Tests for the HTML branch."""

    def test_placeholders_replaced(self, writer: ContentWriter, doc_root: Path):
        body = render(writer, doc_root, "index.html", ContentType.HTML)

        expected = (INDEX_HTML
                    .replace(DATE_TAG.encode(), FIXED_DATE.encode())
                    .replace(SERVER_TAG.encode(), b"Test Server"))
        assert body == expected
        assert b"\r\n" in body  # Line endings preserved

    def test_plain_html_identical(self, writer: ContentWriter, doc_root: Path):
        """Test that a page without placeholders is byte-identical."""
        body = render(writer, doc_root, "plain.html", ContentType.HTML)
        assert body == PLAIN_HTML


class TestBinaryBranch:
    """Tests for the image passthrough branch."""

    def test_large_image_identical(self, writer: ContentWriter, doc_root: Path, image_bytes: bytes):
        """Test a file much larger than the copy buffer."""
        assert len(image_bytes) > writer.buffer_size * 10

        body = render(writer, doc_root, "image.png", ContentType.PNG)
        assert body == image_bytes

    def test_image_with_tag_bytes_not_substituted(self, writer: ContentWriter, tmp_path: Path):
        """Test that placeholders inside images are left alone."""
        data = b"\x89PNG\r\n" + SERVER_TAG.encode() + b"\x00\xff"
        (tmp_path / "tag.png").write_bytes(data)

        assert render(writer, tmp_path, "tag.png", ContentType.PNG) == data


class TestNotFoundBranch:
    """Tests for the fallback branch."""

    def test_missing_file(self, writer: ContentWriter, doc_root: Path):
        assert render(writer, doc_root, "nope.html", ContentType.HTML) == NOT_FOUND_BODY

    def test_directory(self, writer: ContentWriter, doc_root: Path):
        assert render(writer, doc_root, "docs", ContentType.UNKNOWN) == NOT_FOUND_BODY

    def test_existing_file_with_unknown_type(self, writer: ContentWriter, doc_root: Path):
        """Test that an unknown type is never passed through."""
        assert render(writer, doc_root, "notes.txt", ContentType.UNKNOWN) == NOT_FOUND_BODY

    def test_missing_fallback_page(self, doc_root: Path, tmp_path: Path):
        """Test that a missing 404 page is reported, not retried."""
        writer = ContentWriter(not_found_page=tmp_path / "gone.html", server_id="x")

        with pytest.raises(NotFoundPageMissing) as exc_info:
            render(writer, doc_root, "nope.html", ContentType.HTML)

        assert exc_info.value.path == tmp_path / "gone.html"
