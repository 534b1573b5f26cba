import json
import os
import subprocess

import pytest

from conftest import make_catalog
from jlup.exceptions import (
    CatalogChannelMissingError,
    ChannelAlreadyInstalledError,
    ChannelNotInstalledError,
    DefaultChannelRemovalError,
    LinkedChannelImmutableError,
)
from jlup.models.config import LinkedChannel, SystemChannel

posix_only = pytest.mark.skipif(os.name == "nt", reason="symlinks are POSIX only")


def test_add_installs_and_registers_channel(manager, store, paths):
    assert manager.add("release") == "1.9.3"

    config = store.load()
    assert config.installed_versions["1.9.3"].path == "julia-1.9.3"
    assert config.installed_channels["release"] == SystemChannel(version="1.9.3")
    assert config.default == "release"
    assert (paths.home / "julia-1.9.3" / "bin" / "julia").is_file()


def test_add_second_channel_keeps_default_and_shares_version(
    manager, store, downloader
):
    manager.add("release")
    manager.add("lts")

    config = store.load()
    assert config.default == "release"
    assert config.installed_channels["lts"] == SystemChannel(version="1.9.3")
    assert len(downloader.calls) == 1


def test_add_twice_fails_without_download(manager, downloader):
    manager.add("release")

    with pytest.raises(ChannelAlreadyInstalledError):
        manager.add("release")

    assert len(downloader.calls) == 1


def test_add_unknown_channel(manager, paths):
    with pytest.raises(CatalogChannelMissingError):
        manager.add("nightly")

    assert not paths.config_file.exists()


def test_update_then_gc_scenario(manager, store, catalog_source, paths):
    manager.add("release")
    catalog_source.catalog = make_catalog({"release": "1.9.4"})
    manager._catalog = None

    assert manager.update("release") == ["release"]

    config = store.load()
    assert config.installed_channels["release"] == SystemChannel(version="1.9.4")
    # update garbage-collects the version nobody references anymore.
    assert set(config.installed_versions) == {"1.9.4"}
    assert not (paths.home / "julia-1.9.3").exists()
    assert (paths.home / "julia-1.9.4").is_dir()


def test_update_without_changes_keeps_record(manager, paths):
    manager.add("release")
    before = json.loads(paths.config_file.read_text())

    assert manager.update() == []

    assert json.loads(paths.config_file.read_text()) == before


def test_update_failure_persists_nothing(manager, store, catalog_source):
    manager.add("release")
    manager.add("lts")
    # "lts" is visited first and fails, so the whole command is discarded.
    catalog_source.catalog = make_catalog({"release": "1.9.4"})
    manager._catalog = None

    with pytest.raises(CatalogChannelMissingError):
        manager.update()

    config = store.load()
    assert config.installed_channels["release"] == SystemChannel(version="1.9.3")
    assert set(config.installed_versions) == {"1.9.3"}


def test_update_channel_not_installed(manager):
    with pytest.raises(ChannelNotInstalledError):
        manager.update("release")


def test_linked_channel_scenario(manager, store, tmp_path):
    external = tmp_path / "custom" / "julia"
    manager.add("release")
    manager.link("mybuild", str(external), ["--startup-file=no"])

    with pytest.raises(LinkedChannelImmutableError):
        manager.update("mybuild")

    manager.update()

    config = store.load()
    assert config.installed_channels["mybuild"] == LinkedChannel(
        command=str(external), args=["--startup-file=no"]
    )


def test_link_existing_name_fails(manager):
    manager.add("release")

    with pytest.raises(ChannelAlreadyInstalledError):
        manager.link("release", "/usr/bin/julia")


def test_remove_channel_collects_its_version(manager, store, catalog_source, paths):
    catalog_source.catalog = make_catalog({"release": "1.9.3", "beta": "1.10.0"})
    manager.add("release")
    manager.add("beta")

    manager.remove("beta")

    config = store.load()
    assert "beta" not in config.installed_channels
    assert set(config.installed_versions) == {"1.9.3"}
    assert not (paths.home / "julia-1.10.0").exists()


def test_remove_default_channel_is_refused(manager, store):
    manager.add("release")

    with pytest.raises(DefaultChannelRemovalError):
        manager.remove("release")

    assert "release" in store.load().installed_channels


def test_remove_unknown_channel(manager):
    with pytest.raises(ChannelNotInstalledError):
        manager.remove("release")


def test_gc_command(manager, store, paths):
    manager.add("release")
    manager.add("lts")
    config = store.load()
    config.installed_channels["lts"] = LinkedChannel(command="/usr/bin/julia")
    config.installed_channels["release"] = LinkedChannel(command="/usr/bin/julia")
    store.save(config)

    assert manager.gc() == {"1.9.3"}
    assert store.load().installed_versions == {}


def test_set_default(manager, store, catalog_source):
    manager.add("release")
    manager.add("lts")

    manager.set_default("lts")

    assert store.load().default == "lts"


def test_set_default_requires_installed_channel(manager, catalog_source):
    with pytest.raises(ChannelNotInstalledError, match="jlup add lts"):
        manager.set_default("lts")

    with pytest.raises(CatalogChannelMissingError):
        manager.set_default("nonsense")


def test_set_default_does_not_fetch_catalog_for_installed_channel(
    manager, catalog_source
):
    manager.add("release")
    loads = catalog_source.loads
    manager._catalog = None

    manager.set_default("release")

    assert catalog_source.loads == loads


def test_fresh_start_status(manager, paths):
    config = manager.status()

    assert config.installed_channels == {}
    assert config.default is None
    assert not paths.config_file.exists()


@posix_only
def test_symlinks_follow_channel_lifecycle(manager, paths, tmp_path, catalog_source):
    manager.add("release")
    external = tmp_path / "julia"
    manager.link("mybuild", str(external))

    assert manager.set_symlinks(True) is True
    assert os.readlink(paths.bin_dir / "julia-release") == str(
        paths.home / "julia-1.9.3" / "bin" / "julia"
    )
    launcher = paths.bin_dir / "julia-mybuild"
    assert not launcher.is_symlink()
    assert f"exec {external} " in launcher.read_text()

    manager.add("lts")
    assert (paths.bin_dir / "julia-lts").is_symlink()

    manager.remove("lts")
    assert not (paths.bin_dir / "julia-lts").is_symlink()

    assert manager.set_symlinks(True) is False
    assert manager.set_symlinks(False) is True
    assert not (paths.bin_dir / "julia-release").is_symlink()
    assert not (paths.bin_dir / "julia-mybuild").exists()


@posix_only
def test_linked_channel_launcher_forwards_args(manager, paths, tmp_path):
    external = tmp_path / "my julia"
    external.write_text('#!/bin/sh\nprintf "%s\\n" "$@"\n')
    external.chmod(0o755)
    manager.link("mybuild", str(external), ["--startup-file=no"])

    manager.set_symlinks(True)

    result = subprocess.run(
        [str(paths.bin_dir / "julia-mybuild"), "-e", "print(1)"],
        capture_output=True,
        text=True,
        check=True,
    )
    assert result.stdout.splitlines() == ["--startup-file=no", "-e", "print(1)"]


@posix_only
def test_linked_channel_launcher_keeps_bare_command_name(manager, paths):
    manager.set_symlinks(True)

    manager.link("mybuild", "julia", ["--startup-file=no"])

    launcher = paths.bin_dir / "julia-mybuild"
    assert launcher.read_text() == '#!/bin/sh\nexec julia --startup-file=no "$@"\n'
    assert os.access(launcher, os.X_OK)
