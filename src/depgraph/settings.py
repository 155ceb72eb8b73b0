"""Read depgraph settings from .depgraph.toml or pyproject.toml."""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from depgraph.config import ALL, Generator
from depgraph.errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("build") / "reports" / "dependency-graph"
DEFAULT_FORMAT = "png"


@dataclass
class Settings:
    output_dir: Path = DEFAULT_OUTPUT_DIR
    format: str | None = DEFAULT_FORMAT
    generators: dict[str, Generator] = field(default_factory=lambda: {"": ALL})

    def generator(self, name: str | None) -> Generator:
        key = name or ""
        try:
            return self.generators[key]
        except KeyError:
            known = ", ".join(repr(n) for n in self.generators) or "none"
            raise SettingsError(f"Unknown generator {key!r} (known: {known})") from None


def _read_table(project_dir: Path) -> dict | None:
    """Return the raw depgraph table, or None when no settings file has one."""
    # Try .depgraph.toml first
    depgraph_toml = project_dir / ".depgraph.toml"
    if depgraph_toml.exists():
        try:
            with open(depgraph_toml, "rb") as f:
                data = tomllib.load(f)
            return data.get("depgraph", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not parse %s: %s", depgraph_toml, e)

    # Fall back to [tool.depgraph] in pyproject.toml
    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            return data.get("tool", {}).get("depgraph")
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not parse %s: %s", pyproject, e)

    return None


def parse_settings(table: dict) -> Settings:
    """Build :class:`Settings` from a decoded ``[depgraph]`` table."""
    settings = Settings()

    if "output_dir" in table:
        settings.output_dir = Path(table["output_dir"])

    if "format" in table:
        fmt = table["format"]
        settings.format = None if fmt in ("", "none", False) else str(fmt)

    generators = table.get("generators", {})
    if not isinstance(generators, dict):
        raise SettingsError("'generators' must be a table of tables")
    for name, gen_table in generators.items():
        if not isinstance(gen_table, dict):
            raise SettingsError(f"Generator {name!r} must be a table")
        try:
            settings.generators[name] = Generator.from_settings(name, gen_table)
        except (KeyError, ValueError, TypeError, re.error) as e:
            raise SettingsError(f"Invalid generator {name!r}: {e}") from e

    return settings


def load_settings(project_dir: Path) -> Settings:
    table = _read_table(project_dir)
    if table is None:
        return Settings()
    settings = parse_settings(table)
    logger.debug("Generators: %s", list(settings.generators))
    return settings
