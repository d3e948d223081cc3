"""Tests for specgen.generator.writer -- all-or-nothing file output."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from specgen.exceptions import OutputWriteError
from specgen.generator.writer import write_outputs


FILES = {"models.ts": "export interface A {\n}\n", "client.ts": "export interface C {\n}\n"}


class TestWriteOutputs:
    def test_writes_all_files(self, tmp_path: Path) -> None:
        written = write_outputs(tmp_path, FILES)
        assert written == [tmp_path / "models.ts", tmp_path / "client.ts"]
        assert (tmp_path / "models.ts").read_text(encoding="utf-8") == FILES["models.ts"]
        assert (tmp_path / "client.ts").read_text(encoding="utf-8") == FILES["client.ts"]

    def test_creates_missing_directories(self, tmp_path: Path) -> None:
        dest = tmp_path / "src" / "api" / "generated"
        write_outputs(str(dest), FILES)
        assert (dest / "models.ts").is_file()

    def test_existing_directory_is_fine(self, tmp_path: Path) -> None:
        write_outputs(tmp_path, FILES)
        write_outputs(tmp_path, FILES)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["client.ts", "models.ts"]

    def test_overwrites_existing_files(self, tmp_path: Path) -> None:
        (tmp_path / "models.ts").write_text("old", encoding="utf-8")
        write_outputs(tmp_path, FILES)
        assert (tmp_path / "models.ts").read_text(encoding="utf-8") == FILES["models.ts"]

    def test_lf_preserved(self, tmp_path: Path) -> None:
        write_outputs(tmp_path, {"a.ts": "line1\nline2\n"})
        assert (tmp_path / "a.ts").read_bytes() == b"line1\nline2\n"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        write_outputs(tmp_path, FILES)
        assert not [p for p in tmp_path.iterdir() if p.name.endswith(".tmp")]

    def test_destination_is_a_file(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(OutputWriteError, match="Cannot create output directory") as exc_info:
            write_outputs(blocker / "out", FILES)
        assert isinstance(exc_info.value.__cause__, OSError)


class TestAllOrNothing:
    def test_second_commit_failure_rolls_back_new_file(self, tmp_path: Path) -> None:
        real_replace = os.replace
        calls = []

        def _flaky_replace(src, dst):
            calls.append(dst)
            if len(calls) == 2:
                raise OSError("disk full")
            return real_replace(src, dst)

        with patch("specgen.generator.writer.os.replace", side_effect=_flaky_replace):
            with pytest.raises(OutputWriteError, match="disk full"):
                write_outputs(tmp_path, FILES)

        assert list(tmp_path.iterdir()) == []

    def test_second_commit_failure_restores_previous_content(self, tmp_path: Path) -> None:
        (tmp_path / "models.ts").write_text("previous models", encoding="utf-8")
        (tmp_path / "client.ts").write_text("previous client", encoding="utf-8")
        real_replace = os.replace
        calls = []

        def _flaky_replace(src, dst):
            calls.append(dst)
            if len(calls) == 2:
                raise OSError("disk full")
            return real_replace(src, dst)

        with patch("specgen.generator.writer.os.replace", side_effect=_flaky_replace):
            with pytest.raises(OutputWriteError):
                write_outputs(tmp_path, FILES)

        assert (tmp_path / "models.ts").read_text(encoding="utf-8") == "previous models"
        assert (tmp_path / "client.ts").read_text(encoding="utf-8") == "previous client"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["client.ts", "models.ts"]

    def test_staging_failure_writes_nothing(self, tmp_path: Path) -> None:
        with patch(
            "specgen.generator.writer.tempfile.NamedTemporaryFile",
            side_effect=OSError("read-only file system"),
        ):
            with pytest.raises(OutputWriteError, match="read-only file system"):
                write_outputs(tmp_path, FILES)
        assert list(tmp_path.iterdir()) == []
