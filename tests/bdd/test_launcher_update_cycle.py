from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from services.launcher import TransportError
from viewmodels.launcher_state import LauncherStatus
from viewmodels.launcher_viewmodel import LauncherViewModel
from tests.unit.launcher_test_utils import (
    FakeRemoteSource,
    RecordingProcessLauncher,
    build_payload_archive,
    make_harness,
)


scenarios("launcher_update_cycle.feature")


@dataclass
class LauncherWorld:
    release_dir: Path
    install_root: Path
    source: FakeRemoteSource
    process_launcher: RecordingProcessLauncher
    statuses: list[LauncherStatus] | None = None
    viewmodel: LauncherViewModel | None = None

    def require_viewmodel(self) -> LauncherViewModel:
        assert self.viewmodel is not None, "the launcher window has not been shown"
        return self.viewmodel


@pytest.fixture
def world(tmp_path: Path) -> LauncherWorld:
    release_dir = tmp_path / "release"
    release_dir.mkdir()
    return LauncherWorld(
        release_dir=release_dir,
        install_root=tmp_path / "install",
        source=FakeRemoteSource(),
        process_launcher=RecordingProcessLauncher(),
    )


@given("an empty install directory")
def empty_install_directory(world: LauncherWorld) -> None:
    world.install_root.mkdir()


@given(parsers.parse('an install directory with version "{version}" installed'))
def installed_version(world: LauncherWorld, version: str) -> None:
    entry_point = world.install_root / "Build" / "Game.exe"
    entry_point.parent.mkdir(parents=True)
    entry_point.write_bytes(b"installed build")
    (world.install_root / "Version.txt").write_text(version, encoding="utf-8")


@given(parsers.parse('the release server publishes version "{version}"'))
def release_published(world: LauncherWorld, version: str) -> None:
    world.source.descriptor = version
    world.source.archive = build_payload_archive(
        world.release_dir, {"Build/Game.exe": f"build {version}".encode("utf-8")}
    )


@given("the archive download fails")
def archive_download_fails(world: LauncherWorld) -> None:
    world.source.transfer_error = TransportError("connection reset by peer")


@when("the launcher window is shown")
def launcher_window_shown(world: LauncherWorld) -> None:
    harness = make_harness(world.install_root, world.source)
    world.statuses = harness.statuses
    world.viewmodel = LauncherViewModel(
        harness.state, harness.installer, world.process_launcher, harness.paths
    )
    world.viewmodel.on_view_ready()


@when("the archive download recovers")
def archive_download_recovers(world: LauncherWorld) -> None:
    world.source.transfer_error = None


@when("the launch button is pressed")
def launch_button_pressed(world: LauncherWorld) -> None:
    world.require_viewmodel().on_launch_requested()


@then(parsers.parse('the launcher passes through "{statuses}"'))
def launcher_passes_through(world: LauncherWorld, statuses: str) -> None:
    expected = [LauncherStatus(value.strip()) for value in statuses.split(",")]
    assert world.statuses == expected


@then(parsers.parse('the installed version marker reads "{version}"'))
def marker_reads(world: LauncherWorld, version: str) -> None:
    marker = world.install_root / "Version.txt"
    assert marker.read_text(encoding="utf-8") == version


@then(parsers.parse('the launch button reads "{label}"'))
def launch_button_reads(world: LauncherWorld, label: str) -> None:
    assert world.require_viewmodel().launch_label == label


@then(parsers.parse('the displayed version reads "{version}"'))
def displayed_version_reads(world: LauncherWorld, version: str) -> None:
    assert world.require_viewmodel().state.displayed_version == version


@then("pressing the launch button starts the game")
def pressing_launch_starts_game(world: LauncherWorld) -> None:
    viewmodel = world.require_viewmodel()
    assert viewmodel.on_launch_requested() is True
    assert world.process_launcher.launched == [viewmodel.paths]


@then("no archive was downloaded")
def no_archive_downloaded(world: LauncherWorld) -> None:
    assert world.source.transfers == []
