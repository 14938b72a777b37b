"""TOML config loading for exprcalc.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from exprcalc.parser import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT

CONFIG_NAME = "exprcalc.toml"


class ConfigError(ValueError):
    """An exprcalc.toml value has the wrong type or is out of range."""


@dataclass
class ParserConfig:
    max_depth: int = DEFAULT_MAX_DEPTH
    trace: bool = False


@dataclass
class OutputConfig:
    precision: int = 12
    color: bool = True


@dataclass
class CalcConfig:
    parser: ParserConfig = field(default_factory=ParserConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find exprcalc.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> CalcConfig:
    """Parse an exprcalc.toml file into a CalcConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = CalcConfig()

    if "parser" in data:
        prs = data["parser"]
        config.parser = ParserConfig(
            max_depth=_int_setting(
                prs, "parser.max_depth", DEFAULT_MAX_DEPTH, 1, MAX_DEPTH_LIMIT,
            ),
            trace=_bool_setting(prs, "parser.trace", False),
        )

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            precision=_int_setting(out, "output.precision", 12, 0, None),
            color=_bool_setting(out, "output.color", True),
        )

    return config


def _int_setting(
    table: dict, key: str, default: int, low: int, high: int | None,
) -> int:
    value = table.get(key.rpartition(".")[2], default)
    # TOML booleans are ints to Python
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bounds = f"between {low} and {high}" if high is not None else f"at least {low}"
        raise ConfigError(f"{key} must be {bounds}, got {value}")
    return value


def _bool_setting(table: dict, key: str, default: bool) -> bool:
    value = table.get(key.rpartition(".")[2], default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def discover_config(start_path: Path | None = None) -> CalcConfig:
    """Load the nearest exprcalc.toml, or the defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return CalcConfig()
