"""Tests for export naming and archive writing."""

import zipfile

import pytest

from config.exceptions import ArchiveError
from publisher.export import export_filename, write_archive


class TestExportFilename:
    def test_whitespace_to_underscores(self):
        assert export_filename("My Great  Book") == "My_Great_Book.epub"

    def test_path_separators_replaced(self):
        assert export_filename("Either/Or") == "Either_Or.epub"
        assert export_filename("A\\B") == "A_B.epub"

    def test_surrounding_whitespace_not_trimmed(self):
        assert export_filename(" Echo  of Night ") == "_Echo_of_Night_.epub"

    def test_blank_title_falls_back(self):
        assert export_filename("   ") == "book.epub"
        assert export_filename("") == "book.epub"


class TestWriteArchive:
    def test_writes_epub(self, sample_book, tmp_path):
        path = write_archive(sample_book, directory=tmp_path / "out", language="en")
        assert path == tmp_path / "out" / "Echo.epub"
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist()[0] == "mimetype"

    def test_write_failure_raises_archive_error(self, sample_book, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(ArchiveError):
            write_archive(sample_book, directory=blocker, language="en")
