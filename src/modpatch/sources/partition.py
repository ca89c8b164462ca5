"""Group source files by target release, then by module."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from modpatch.sources.directory import SourceDirectory, SourceFile

logger = logging.getLogger(__name__)

# Release of the sources that have no release-specific directory.
NO_RELEASE = 0


class SourcesForRelease:
    """The source files to compile for one Java release.

    ``roots`` maps module names (``""`` for no module) to the root
    directories contributing files to that module for this release.
    """

    def __init__(self, release: int) -> None:
        self.release = release
        self.files: list[Path] = []
        self.roots: dict[str, list[Path]] = {}
        self._directories: dict[Path, SourceDirectory] = {}
        self._last_directory: SourceDirectory | None = None

    def add(self, source: SourceFile) -> None:
        directory = source.directory
        # Files of the same directory usually come in long runs
        if directory is not self._last_directory:
            self._last_directory = directory
            module = directory.module_name or ""
            roots = self.roots.setdefault(module, [])
            if directory.root not in roots:
                roots.append(directory.root)
            self._directories.setdefault(directory.root, directory)
        self.files.append(source.file)

    def output_directories(self) -> dict[str, Path]:
        """Map each module of this release to its output directory."""
        outputs: dict[str, Path] = {}
        for directory in self._directories.values():
            outputs.setdefault(directory.module_name or "", directory.output_directory)
        return outputs

    def __repr__(self) -> str:
        return (
            f"SourcesForRelease(release={self.release}, "
            f"modules={list(self.roots)}, files={len(self.files)})"
        )


def group_by_release_and_module(
    sources: Iterable[SourceFile],
) -> list[SourcesForRelease]:
    """Group *sources* by release, in ascending release order.

    Sources without a release are in the first group, with release
    ``NO_RELEASE``. Files keep their input order within a group.
    """
    result: dict[int, SourcesForRelease] = {}
    for source in sources:
        release = source.directory.release
        if release is None:
            release = NO_RELEASE
        bucket = result.get(release)
        if bucket is None:
            bucket = SourcesForRelease(release)
            result[release] = bucket
        bucket.add(source)
    groups = [result[release] for release in sorted(result)]
    logger.debug("Sources grouped into releases %s", [g.release for g in groups])
    return groups
