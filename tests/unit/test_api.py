"""Unit tests for the public conversion API."""

import io
from pathlib import Path

import pytest
from fixtures.generators.mhtml_fixtures import create_mhtml_file, create_mhtml_with_assets, create_simple_mhtml

from mht2html import __version__
from mht2html.api import convert, convert_file, html_output_name, is_mhtml_filename, load_archive_text
from mht2html.exceptions import BoundaryNotFoundError, FileError, FormatError, ValidationError
from mht2html.options import ConversionOptions


@pytest.mark.unit
class TestFileNames:
    """Test archive name helpers."""

    @pytest.mark.parametrize("name", ["page.mht", "page.mhtml", "PAGE.MHT", "dir/page.MhTmL", Path("a/b.mht")])
    def test_archive_names_accepted(self, name):
        assert is_mhtml_filename(name) is True

    @pytest.mark.parametrize("name", ["page.html", "page.mht.txt", "mht", "page"])
    def test_other_names_rejected(self, name):
        assert is_mhtml_filename(name) is False

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("page.mhtml", "page.html"),
            ("page.MHT", "page.html"),
            ("/tmp/archive.v2.mht", "archive.v2.html"),
            ("notes", "notes.html"),
        ],
    )
    def test_html_output_name(self, name, expected):
        assert html_output_name(name) == expected


@pytest.mark.unit
@pytest.mark.mhtml
class TestConvert:
    """Test conversion of archive text."""

    def test_convert_returns_document_with_metadata(self):
        document = convert(create_mhtml_with_assets())

        assert document.metadata is not None
        assert document.metadata.title == "Page With Assets"
        assert document.metadata.resource_count == 5
        assert len(document.resources) == 4
        assert [r.location for r in document.unreferenced] == ["https://example.com/images/unused.gif"]

    def test_keyword_overrides(self):
        document = convert(create_mhtml_with_assets(), inline_scripts=False)

        assert '<script src="https://example.com/js/app.js"></script>' in document.html

    def test_keyword_overrides_applied_on_top_of_options(self):
        options = ConversionOptions(inject_scroll_styles=False)
        document = convert(create_mhtml_with_assets(), options, inline_images=False)

        assert "mht-converter-added-styles" not in document.html
        assert "data:image" not in document.html

    def test_unknown_keyword_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            convert(create_simple_mhtml(), inline_fonts=True)

        assert exc_info.value.parameter_name == "inline_fonts"

    def test_invalid_keyword_value_rejected(self):
        with pytest.raises(ValidationError):
            convert(create_simple_mhtml(), max_resource_size=-1)

    def test_fatal_errors_propagate(self):
        with pytest.raises(BoundaryNotFoundError):
            convert("no boundary here")


@pytest.mark.unit
@pytest.mark.mhtml
class TestConvertFile:
    """Test reading archives from paths, bytes and streams."""

    def test_path_input(self, temp_dir):
        path = create_mhtml_file(create_simple_mhtml(), temp_dir)

        document = convert_file(path)

        assert "<h1>Test MHTML Document</h1>" in document.html
        assert document.metadata.custom["source_path"] == str(path)

    def test_string_path_input(self, temp_dir):
        path = create_mhtml_file(create_simple_mhtml(), temp_dir, "page.mht")

        assert "Test MHTML Document" in convert_file(str(path)).html

    def test_bytes_input(self):
        document = convert_file(create_simple_mhtml().encode("utf-8"))

        assert "Test MHTML Document" in document.html
        assert "source_path" not in document.metadata.custom

    def test_binary_stream_input(self):
        assert "Test MHTML Document" in convert_file(io.BytesIO(create_simple_mhtml().encode("utf-8"))).html

    def test_text_stream_input(self):
        assert "Test MHTML Document" in convert_file(io.StringIO(create_simple_mhtml())).html

    def test_crlf_preserved_from_file(self, temp_dir):
        path = create_mhtml_file(create_simple_mhtml(), temp_dir)

        assert "\r\n" in load_archive_text(path)

    def test_wrong_extension_rejected(self, temp_dir):
        path = temp_dir / "page.html"
        path.write_text(create_simple_mhtml(), encoding="utf-8")

        with pytest.raises(FormatError):
            convert_file(path)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileError) as exc_info:
            convert_file(temp_dir / "missing.mhtml")

        assert "File not found" in exc_info.value.message

    def test_unsupported_source_type(self):
        with pytest.raises(ValidationError):
            convert_file(12345)  # type: ignore[arg-type]


@pytest.mark.unit
def test_version_exposed():
    assert __version__ == "1.0.0"
