"""Tests for export downloads."""

import os
from unittest.mock import MagicMock

import pytest

from vacation_planner.data.models import ExportFormat
from vacation_planner.services.downloads import FileDownloadSink, download_export
from vacation_planner.utils.error_handling import (
    VacationPlannerError,
    ValidationError,
)


def test_file_sink_writes_document(tmp_path):
    sink = FileDownloadSink(str(tmp_path / "exports"))

    path = sink("trip-1", ExportFormat.XLSX, b"sheet")

    assert os.path.basename(path) == "trip-plan-trip-1.xlsx"
    with open(path, "rb") as f:
        assert f.read() == b"sheet"


def test_file_sink_failure_is_wrapped(tmp_path):
    blocker = tmp_path / "exports"
    blocker.write_text("not a directory")
    sink = FileDownloadSink(str(blocker))

    with pytest.raises(VacationPlannerError):
        sink("trip-1", ExportFormat.PDF, b"%PDF")


async def test_download_export(repo, mock_client):
    mock_client.request_bytes.return_value = b"%PDF"
    sink = MagicMock(return_value="/downloads/trip-plan-trip-1.pdf")

    path = await download_export(repo, "trip-1", "pdf", sink)

    assert path == "/downloads/trip-plan-trip-1.pdf"
    sink.assert_called_once_with("trip-1", ExportFormat.PDF, b"%PDF")


async def test_download_export_rejects_unknown_format(repo, mock_client):
    with pytest.raises(ValidationError):
        await download_export(repo, "trip-1", "docx", MagicMock())
    mock_client.request_bytes.assert_not_called()
