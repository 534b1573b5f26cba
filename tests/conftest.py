from __future__ import annotations

import asyncio
import io
import shutil
import tarfile
from collections.abc import Callable
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from jlup.core.aliases import AliasManager
from jlup.core.channel_manager import ChannelManager
from jlup.core.installer import Installer
from jlup.models.catalog import VersionCatalog
from jlup.storage.config_manager import ConfigStore
from jlup.utils.path import JlupPaths

JULIA_SCRIPT = b"#!/bin/sh\necho julia\n"


def add_file(tar: tarfile.TarFile, name: str, data: bytes, mode: int = 0o644) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(data)
    info.mode = mode
    tar.addfile(info, io.BytesIO(data))


def add_dir(tar: tarfile.TarFile, name: str) -> None:
    info = tarfile.TarInfo(name)
    info.type = tarfile.DIRTYPE
    info.mode = 0o755
    tar.addfile(info)


def add_symlink(tar: tarfile.TarFile, name: str, target: str) -> None:
    info = tarfile.TarInfo(name)
    info.type = tarfile.SYMTYPE
    info.linkname = target
    tar.addfile(info)


def write_julia_tarball(
    path: Path,
    top: str = "julia-1.9.3",
    extra: Callable[[tarfile.TarFile], None] | None = None,
) -> Path:
    """Writes a small archive shaped like an official Julia release."""
    with tarfile.open(path, "w:gz") as tar:
        add_dir(tar, top)
        add_dir(tar, f"{top}/bin")
        add_file(tar, f"{top}/bin/julia", JULIA_SCRIPT, mode=0o755)
        add_dir(tar, f"{top}/lib")
        add_file(tar, f"{top}/lib/libjulia.so.1", b"\x7fELF")
        add_symlink(tar, f"{top}/lib/libjulia.so", "libjulia.so.1")
        if extra:
            extra(tar)
    return path


class FakeDownloader:
    """Serves prepared archives instead of downloading them."""

    def __init__(self):
        self.archives: dict[str, Path] = {}
        self.calls: list[str] = []

    def serve(self, url: str, archive_path: Path) -> None:
        self.archives[url] = archive_path

    def fetch(self, url: str, destination_path: Path, description: str = "") -> None:
        self.calls.append(url)
        shutil.copyfile(self.archives[url], destination_path)


def run_with_server(routes: dict[str, Callable], scenario: Callable):
    """Serves GET ``routes`` from a local aiohttp app while awaiting ``scenario(server)``."""

    async def main():
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        async with TestServer(app) as server:
            return await scenario(server)

    return asyncio.run(main())


def make_catalog(
    channels: dict[str, str], versions: dict[str, str] | None = None
) -> VersionCatalog:
    if versions is None:
        versions = {v: f"https://example.org/julia-{v}.tar.gz" for v in channels.values()}
    return VersionCatalog.model_validate(
        {
            "AvailableChannels": {c: {"Version": v} for c, v in channels.items()},
            "AvailableVersions": {v: {"Url": url} for v, url in versions.items()},
        }
    )


@pytest.fixture()
def paths(tmp_path: Path) -> JlupPaths:
    return JlupPaths(home=tmp_path / "home", bin_dir=tmp_path / "bin")


@pytest.fixture()
def downloader(tmp_path: Path) -> FakeDownloader:
    fake = FakeDownloader()
    for version in ("1.9.3", "1.9.4", "1.10.0"):
        archive = write_julia_tarball(
            tmp_path / f"julia-{version}.tar.gz", top=f"julia-{version}"
        )
        fake.serve(f"https://example.org/julia-{version}.tar.gz", archive)
    return fake


@pytest.fixture()
def installer(paths: JlupPaths, downloader: FakeDownloader) -> Installer:
    return Installer(paths, downloader)


@pytest.fixture()
def aliases(paths: JlupPaths) -> AliasManager:
    return AliasManager(paths.bin_dir)


@pytest.fixture()
def store(paths: JlupPaths) -> ConfigStore:
    return ConfigStore(paths.config_file)


class CatalogHolder:
    """A mutable catalog source, so tests can publish new versions."""

    def __init__(self, catalog: VersionCatalog):
        self.catalog = catalog
        self.loads = 0

    def __call__(self) -> VersionCatalog:
        self.loads += 1
        return self.catalog


@pytest.fixture()
def catalog_source() -> CatalogHolder:
    return CatalogHolder(make_catalog({"release": "1.9.3", "lts": "1.9.3"}))


@pytest.fixture()
def manager(
    paths: JlupPaths,
    store: ConfigStore,
    installer: Installer,
    aliases: AliasManager,
    catalog_source: CatalogHolder,
) -> ChannelManager:
    return ChannelManager(paths, store, installer, aliases, catalog_source)
