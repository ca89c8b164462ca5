"""Source roots and the source files discovered in them."""

from __future__ import annotations

import enum
import fnmatch
import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import InitVar, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class FileKind(enum.Enum):
    SOURCE = ".java"
    CLASS = ".class"
    OTHER = ""


def output_directory_for(
    base: Path, module_name: str | None, release: int | None
) -> Path:
    """Return where the classes of a source root are written.

    The module name comes first, then the multi-release layout
    ``META-INF/versions/<release>``.
    """
    output = base
    if module_name is not None:
        output = output / module_name
    if release is not None:
        output = output / "META-INF" / "versions" / str(release)
    return output


@dataclass(frozen=True)
class SourceDirectory:
    """A root directory of source files for one module and one release.

    Two directories are equal if they have the same root, module name,
    release and output directory.
    """

    root: Path
    base_output: InitVar[Path]
    module_name: str | None = None
    release: int | None = None
    file_kind: FileKind = field(default=FileKind.SOURCE, compare=False)
    output_file_kind: FileKind = field(default=FileKind.CLASS, compare=False)
    output_directory: Path = field(init=False)

    def __post_init__(self, base_output: Path) -> None:
        if self.module_name is not None and not self.module_name.strip():
            object.__setattr__(self, "module_name", None)
        object.__setattr__(
            self,
            "output_directory",
            output_directory_for(base_output, self.module_name, self.release),
        )

    @classmethod
    def from_paths(
        cls, roots: Iterable[Path], output_directory: Path
    ) -> list[SourceDirectory]:
        """Return a directory for each existing root, without module or release."""
        return [cls(root, output_directory) for root in roots if root.exists()]

    def __str__(self) -> str:
        text = f'"{self.root}"'
        if self.module_name is not None:
            text += f' for module "{self.module_name}"'
        if self.release is not None:
            text += f" on Java release {self.release}"
        return text


@dataclass(frozen=True)
class SourceFile:
    """A source file and the root directory it was found in."""

    file: Path
    directory: SourceDirectory


def _is_excluded(relative: str, excludes: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(relative, pattern) for pattern in excludes)


def discover_sources(
    directories: Iterable[SourceDirectory], excludes: Sequence[str] = ()
) -> Iterator[SourceFile]:
    """Yield the source files of each directory, in directory order.

    Files within a directory are sorted. *excludes* are glob patterns
    matched against the path relative to the root, with ``/`` separators.
    """
    for directory in directories:
        if not directory.root.is_dir():
            logger.debug("Skipping missing source root %s", directory.root)
            continue
        suffix = directory.file_kind.value
        count = 0
        for path in sorted(directory.root.rglob(f"*{suffix}")):
            if not path.is_file():
                continue
            relative = path.relative_to(directory.root).as_posix()
            if excludes and _is_excluded(relative, excludes):
                continue
            count += 1
            yield SourceFile(path, directory)
        logger.debug("%s: %d source files", directory, count)
