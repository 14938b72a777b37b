"""Shared pytest fixtures for the exprcalc test suite."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from exprcalc.config import CalcConfig


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_project(tmp_path, monkeypatch):
    """A working directory holding an exprcalc.toml and an expression file."""
    (tmp_path / "exprcalc.toml").write_text(
        "[parser]\nmax_depth = 64\n"
        "[output]\nprecision = 4\ncolor = false\n"
    )
    (tmp_path / "exprs.txt").write_text(
        "# sample expressions\n"
        "1 + 2 * 3\n"
        "\n"
        "3 / (4 + 6)\n"
        "2 ** 2 ** 2\n"
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    """Run from a directory tree with no exprcalc.toml anywhere above it."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "exprcalc.cli.discover_config", lambda start_path=None: CalcConfig(),
    )
    return tmp_path
