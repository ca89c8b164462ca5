"""Project configuration from ``.modpatch.toml`` or ``pyproject.toml``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from modpatch.errors import ConfigError
from modpatch.patch import PATCH_FILE_NAME

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {
    "test",
    "output-directory",
    "main-output-directory",
    "patch-file",
    "module",
    "dependencies",
    "pom",
    "excludes",
    "sources",
}


@dataclass(frozen=True)
class SourceConfig:
    """One configured source root."""

    root: Path
    module: str | None = None
    release: int | None = None


@dataclass(frozen=True)
class ProjectConfig:
    """Settings of one project, with paths resolved against the project dir."""

    project_dir: Path
    test: bool = False
    output_directory: Path | None = None
    main_output_directory: Path | None = None
    patch_file: str = PATCH_FILE_NAME
    module: str | None = None
    dependencies: Path | None = None
    pom: Path | None = None
    excludes: tuple[str, ...] = ()
    sources: tuple[SourceConfig, ...] = field(default_factory=tuple)

    def with_test(self, test: bool) -> ProjectConfig:
        return replace(self, test=test)

    def effective_output_directory(self) -> Path:
        """Output directory, defaulting to the Maven conventions."""
        if self.output_directory is not None:
            return self.output_directory
        return self.project_dir / "target" / ("test-classes" if self.test else "classes")

    def effective_main_output_directory(self) -> Path:
        if self.main_output_directory is not None:
            return self.main_output_directory
        return self.project_dir / "target" / "classes"

    def effective_sources(self) -> tuple[SourceConfig, ...]:
        """Configured source roots, defaulting to ``src/{main,test}/java``."""
        if self.sources:
            return self.sources
        scope = "test" if self.test else "main"
        return (SourceConfig(root=self.project_dir / "src" / scope / "java"),)


def _read_table(project_dir: Path) -> tuple[dict, str | None]:
    """Return the modpatch table and the file it was read from."""
    # Try .modpatch.toml first
    modpatch_toml = project_dir / ".modpatch.toml"
    if modpatch_toml.exists():
        return _load_toml(modpatch_toml).get("modpatch", {}), str(modpatch_toml)

    # Fall back to [tool.modpatch] in pyproject.toml
    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        table = _load_toml(pyproject).get("tool", {}).get("modpatch")
        if table is not None:
            return table, str(pyproject)

    return {}, None


def _load_toml(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e


def _expect(value, kind: type | tuple[type, ...], key: str, source: str):
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is int):
        raise ConfigError(f"{source}: '{key}' has an invalid value {value!r}")
    return value


def _optional_path(table: dict, key: str, project_dir: Path, source: str) -> Path | None:
    value = table.get(key)
    if value is None:
        return None
    return project_dir / _expect(value, str, key, source)


def _parse_sources(entries, project_dir: Path, source: str) -> tuple[SourceConfig, ...]:
    _expect(entries, list, "sources", source)
    result = []
    for entry in entries:
        _expect(entry, dict, "sources", source)
        if "root" not in entry:
            raise ConfigError(f"{source}: source entry without 'root'")
        module = entry.get("module")
        release = entry.get("release")
        result.append(
            SourceConfig(
                root=project_dir / _expect(entry["root"], str, "root", source),
                module=_expect(module, str, "module", source) if module is not None else None,
                release=_expect(release, int, "release", source) if release is not None else None,
            )
        )
    return tuple(result)


def load_config(project_dir: Path) -> ProjectConfig:
    """Read the configuration of *project_dir*; defaults if there is none."""
    table, source = _read_table(project_dir)
    if source is None:
        logger.debug("No modpatch configuration in %s", project_dir)
        return ProjectConfig(project_dir=project_dir)
    if not isinstance(table, dict):
        raise ConfigError(f"{source}: modpatch configuration must be a table")

    for key in table:
        if key not in _KNOWN_KEYS:
            logger.debug("%s: ignoring unknown key %r", source, key)

    module = table.get("module")
    config = ProjectConfig(
        project_dir=project_dir,
        test=_expect(table.get("test", False), bool, "test", source),
        output_directory=_optional_path(table, "output-directory", project_dir, source),
        main_output_directory=_optional_path(
            table, "main-output-directory", project_dir, source
        ),
        patch_file=_expect(table.get("patch-file", PATCH_FILE_NAME), str, "patch-file", source),
        module=_expect(module, str, "module", source) if module is not None else None,
        dependencies=_optional_path(table, "dependencies", project_dir, source),
        pom=_optional_path(table, "pom", project_dir, source),
        excludes=tuple(_expect(table.get("excludes", []), list, "excludes", source)),
        sources=_parse_sources(table.get("sources", []), project_dir, source),
    )
    logger.debug("Configuration read from %s", source)
    return config
