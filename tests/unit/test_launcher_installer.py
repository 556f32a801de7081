from __future__ import annotations

import logging
from pathlib import Path

import pytest

from services.launcher import TransportError, Version
from viewmodels.launcher_state import LauncherStatus
from tests.unit.launcher_test_utils import (
    FakeRemoteSource,
    build_payload_archive,
    make_harness,
)


def test_first_install_downloads_extracts_and_records_version(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor="1.0.0", archive=build_payload_archive(tmp_path))
    harness = make_harness(tmp_path / "install", source)

    harness.installer.check_for_updates()

    assert harness.statuses == [
        LauncherStatus.DOWNLOADING_GAME,
        LauncherStatus.EXTRACTING_GAME,
        LauncherStatus.READY,
    ]
    assert harness.paths.version_file.read_text(encoding="utf-8") == "1.0.0"
    assert harness.paths.entry_point.read_bytes() == b"payload"
    assert (harness.paths.payload_dir / "Data" / "level1.dat").exists()
    assert not harness.paths.archive_path.exists()
    assert harness.state.displayed_version == "1.0.0"
    assert harness.state.can_launch()
    assert source.transfers == [(harness.paths.archive_path, Version(1, 0, 0))]


def test_first_install_is_labelled_downloading_game_before_transfer_completes(
    tmp_path: Path,
) -> None:
    source = FakeRemoteSource(
        descriptor="1.0.0",
        archive=build_payload_archive(tmp_path),
        complete_immediately=False,
    )
    harness = make_harness(tmp_path / "install", source)

    harness.installer.check_for_updates()

    assert harness.state.status is LauncherStatus.DOWNLOADING_GAME
    assert not harness.state.can_launch()
    assert not harness.state.can_retry()

    source.finish_pending()

    assert harness.state.status is LauncherStatus.READY


def test_matching_versions_are_ready_without_download(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor="1.4.2")
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("1.4.2", encoding="utf-8")

    harness.installer.check_for_updates()

    assert harness.statuses == [LauncherStatus.READY]
    assert source.transfers == []
    assert harness.state.displayed_version == "1.4.2"


def test_different_remote_version_runs_update_pipeline(tmp_path: Path) -> None:
    source = FakeRemoteSource(
        descriptor="1.5.0",
        archive=build_payload_archive(tmp_path, {"Build/Game.exe": b"new build"}),
    )
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("1.4.2", encoding="utf-8")
    old_file = harness.paths.payload_dir / "Obsolete" / "old.dat"
    old_file.parent.mkdir(parents=True)
    old_file.write_bytes(b"old")
    harness.paths.entry_point.write_bytes(b"old build")

    harness.installer.check_for_updates()

    assert harness.statuses == [
        LauncherStatus.DOWNLOADING_UPDATE,
        LauncherStatus.EXTRACTING_GAME,
        LauncherStatus.READY,
    ]
    assert harness.paths.version_file.read_text(encoding="utf-8") == source.descriptor
    assert harness.paths.entry_point.read_bytes() == b"new build"
    assert not old_file.exists()
    assert harness.state.displayed_version == "1.5.0"


def test_older_remote_version_is_installed_like_an_update(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor="1.0.0", archive=build_payload_archive(tmp_path))
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("2.0.0", encoding="utf-8")

    harness.installer.check_for_updates()

    assert harness.statuses[0] is LauncherStatus.DOWNLOADING_UPDATE
    assert harness.state.status is LauncherStatus.READY
    assert harness.paths.version_file.read_text(encoding="utf-8") == "1.0.0"


def test_malformed_marker_is_compared_as_zero_version(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor="1.0.0", archive=build_payload_archive(tmp_path))
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("corrupted", encoding="utf-8")

    harness.installer.check_for_updates()

    assert harness.statuses[0] is LauncherStatus.DOWNLOADING_UPDATE
    assert harness.paths.version_file.read_text(encoding="utf-8") == "1.0.0"


def test_undecodable_marker_takes_update_path(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor="1.0.0", archive=build_payload_archive(tmp_path))
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_bytes(b"\xff\xfe1.0.0")

    harness.installer.check_for_updates()

    assert harness.statuses == [
        LauncherStatus.DOWNLOADING_UPDATE,
        LauncherStatus.EXTRACTING_GAME,
        LauncherStatus.READY,
    ]
    assert harness.paths.version_file.read_text(encoding="utf-8") == "1.0.0"


def test_failed_transfer_leaves_marker_and_staged_archive(tmp_path: Path) -> None:
    source = FakeRemoteSource(
        descriptor="1.5.0", transfer_error=TransportError("connection reset")
    )
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("1.4.2", encoding="utf-8")
    harness.paths.archive_path.write_bytes(b"partial download")

    harness.installer.check_for_updates()

    assert harness.statuses == [LauncherStatus.DOWNLOADING_UPDATE, LauncherStatus.FAILED]
    assert harness.paths.version_file.read_text(encoding="utf-8") == "1.4.2"
    assert harness.paths.archive_path.read_bytes() == b"partial download"
    assert harness.state.can_retry()
    assert "connection reset" in (harness.state.last_error or "")


def test_descriptor_failure_with_installed_version_fails(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor_error=TransportError("offline"))
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("1.4.2", encoding="utf-8")

    harness.installer.check_for_updates()

    assert harness.statuses == [LauncherStatus.FAILED]
    assert harness.state.displayed_version == "1.4.2"
    assert source.transfers == []


def test_descriptor_failure_on_first_install_fails(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor_error=TransportError("offline"))
    harness = make_harness(tmp_path / "install", source)

    harness.installer.check_for_updates()

    assert harness.statuses == [LauncherStatus.FAILED]
    assert not harness.paths.version_file.exists()


def test_non_numeric_descriptor_fails_the_check(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor="one.two.three")
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("1.0.0", encoding="utf-8")

    harness.installer.check_for_updates()

    assert harness.state.status is LauncherStatus.FAILED
    assert source.transfers == []


def test_extraction_failure_fails_without_rollback(tmp_path: Path) -> None:
    corrupt = tmp_path / "corrupt.zip"
    corrupt.write_bytes(b"not a zip file")
    source = FakeRemoteSource(descriptor="2.0.0", archive=corrupt)
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("1.0.0", encoding="utf-8")
    harness.paths.entry_point.parent.mkdir(parents=True)
    harness.paths.entry_point.write_bytes(b"old build")

    harness.installer.check_for_updates()

    assert harness.statuses == [
        LauncherStatus.DOWNLOADING_UPDATE,
        LauncherStatus.EXTRACTING_GAME,
        LauncherStatus.FAILED,
    ]
    assert not harness.paths.payload_dir.exists()
    assert harness.paths.version_file.read_text(encoding="utf-8") == "1.0.0"
    assert harness.paths.archive_path.exists()
    assert not harness.state.can_launch()


def test_retry_after_failure_runs_a_new_check(tmp_path: Path) -> None:
    source = FakeRemoteSource(descriptor_error=TransportError("offline"))
    harness = make_harness(tmp_path / "install", source)

    harness.installer.check_for_updates()
    assert harness.state.status is LauncherStatus.FAILED

    source.descriptor_error = None
    source.archive = build_payload_archive(tmp_path)
    harness.installer.check_for_updates()

    assert harness.state.status is LauncherStatus.READY
    assert harness.state.last_error is None
    assert source.descriptor_requests == 2


def test_installer_logs_update_direction(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="services.launcher")
    source = FakeRemoteSource(descriptor="1.0.0", archive=build_payload_archive(tmp_path))
    harness = make_harness(tmp_path / "install", source)
    harness.paths.version_file.write_text("2.0.0", encoding="utf-8")

    harness.installer.check_for_updates()

    messages = [record.getMessage() for record in caplog.records]
    assert any("downgrade" in message for message in messages)
    assert any("Installed version 1.0.0" in message for message in messages)


def test_wait_for_transfer_without_transfer_returns_immediately(tmp_path: Path) -> None:
    harness = make_harness(tmp_path / "install", FakeRemoteSource(descriptor="1.0.0"))

    assert harness.installer.wait_for_transfer(timeout=0.1)
