"""Tests for the public API."""

from __future__ import annotations

from typer.testing import CliRunner

from huereport import __version__
from huereport.cli.app import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"huereport version {__version__}" in result.stdout
