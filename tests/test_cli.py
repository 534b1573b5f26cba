import json

import pytest
from typer.testing import CliRunner

from jlup import __version__
from jlup.cli.app import app
from jlup.exceptions import ChannelNotInstalledError

runner = CliRunner()


@pytest.fixture(autouse=True)
def jlup_env(paths, monkeypatch):
    monkeypatch.setenv("JLUP_HOME", str(paths.home))
    monkeypatch.setenv("JLUP_BIN_DIR", str(paths.bin_dir))


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_status_on_fresh_install():
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "No Julia channels installed" in result.stdout


def test_link_and_status(paths):
    result = runner.invoke(
        app, ["link", "mybuild", "/opt/julia/bin/julia", "--startup-file=no"]
    )
    assert result.exit_code == 0, result.output

    record = json.loads(paths.config_file.read_text())
    assert record["InstalledChannels"]["mybuild"] == {
        "Kind": "linked",
        "Command": "/opt/julia/bin/julia",
        "Args": ["--startup-file=no"],
    }

    result = runner.invoke(app, ["st"])
    assert result.exit_code == 0
    assert "mybuild" in result.stdout


def test_remove_unknown_channel_fails():
    result = runner.invoke(app, ["rm", "release"])

    assert result.exit_code == 1
    assert isinstance(result.exception, ChannelNotInstalledError)


def test_config_channelsymlinks(paths):
    result = runner.invoke(app, ["config", "channelsymlinks", "true"])

    assert result.exit_code == 0, result.output
    record = json.loads(paths.config_file.read_text())
    assert record["Settings"]["CreateChannelSymlinks"] is True


def test_config_rejects_unknown_property():
    result = runner.invoke(app, ["config", "colour", "true"])

    assert result.exit_code == 1
    assert "Unknown property" in result.stdout


def test_gc_with_nothing_installed():
    result = runner.invoke(app, ["gc"])

    assert result.exit_code == 0
    assert "Nothing to collect" in result.stdout
