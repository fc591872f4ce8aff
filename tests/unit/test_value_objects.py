"""Unit tests for domain value objects."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.domain.exceptions import InvalidBlobNameException
from src.domain.value_objects import AccessWindow, BlobName


class TestBlobName:
    """Tests for BlobName value object."""

    def test_generate_keeps_filename(self):
        name = BlobName.generate("report.pdf")
        assert name.original_filename == "report.pdf"
        assert name.value == f"{name.unique_id}_report.pdf"
        assert str(name) == name.value

    def test_unique_id_is_uuid_hex(self):
        name = BlobName.generate("report.pdf")
        assert len(name.unique_id) == 32
        int(name.unique_id, 16)

    def test_generate_is_unique(self):
        names = {BlobName.generate("same.txt").value for _ in range(50)}
        assert len(names) == 50

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("dir/sub/photo.png", "photo.png"),
            ("C:\\Users\\me\\photo.png", "photo.png"),
            ("  notes.txt ", "notes.txt"),
            ("données.csv", "données.csv"),
        ],
    )
    def test_strips_directories(self, filename, expected):
        assert BlobName.generate(filename).original_filename == expected

    def test_custom_separator(self):
        name = BlobName.generate("a.txt", separator="-")
        assert name.value == f"{name.unique_id}-a.txt"

    @pytest.mark.parametrize("filename", [None, "", "   "])
    def test_empty_filename(self, filename):
        with pytest.raises(InvalidBlobNameException) as exc_info:
            BlobName.generate(filename)
        assert exc_info.value.reason == "Filename cannot be empty"

    @pytest.mark.parametrize("filename", ["..", "dir/..", "."])
    def test_no_base_name(self, filename):
        with pytest.raises(InvalidBlobNameException):
            BlobName.generate(filename)

    def test_immutable(self):
        name = BlobName.generate("a.txt")
        with pytest.raises(ValidationError):
            name.original_filename = "b.txt"  # type: ignore[misc]


class TestAccessWindow:
    """Tests for AccessWindow value object."""

    def test_around_defaults(self):
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        window = AccessWindow.around(moment)

        assert window.starts_on == moment - timedelta(minutes=100)
        assert window.expires_on == moment + timedelta(minutes=100)
        assert window.duration == timedelta(minutes=200)

    def test_around_now(self):
        before = datetime.now(UTC)
        window = AccessWindow.around()
        after = datetime.now(UTC)

        moment = window.starts_on + timedelta(minutes=100)
        assert before <= moment <= after

    def test_custom_lead_and_ttl(self):
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        window = AccessWindow.around(
            moment, lead=timedelta(0), ttl=timedelta(minutes=15)
        )

        assert window.starts_on == moment
        assert window.duration == timedelta(minutes=15)

    def test_empty_window_rejected(self):
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        with pytest.raises(ValidationError):
            AccessWindow(starts_on=moment, expires_on=moment)
