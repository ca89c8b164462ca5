"""Exceptions raised by modpatch."""

from __future__ import annotations

from pathlib import Path


class ModPatchError(Exception):
    """Base class for all errors reported by modpatch."""


class PatchSyntaxError(ModPatchError):
    """A ``module-info-patch.txt`` file does not follow the patch grammar."""

    def __init__(
        self,
        message: str,
        line: int,
        token: str | None = None,
        path: Path | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.token = token
        self.path = path
        super().__init__(str(self))

    def with_path(self, path: Path) -> PatchSyntaxError:
        """Return a copy of this error attributed to *path*."""
        return PatchSyntaxError(self.message, self.line, self.token, path)

    def __str__(self) -> str:
        text = f"{self.message} (line {self.line})"
        if self.path is not None:
            text = f"{self.path}: {text}"
        return text


class ModuleDescriptorError(ModPatchError):
    """The module descriptor of a class directory or jar could not be read."""


class ConfigError(ModPatchError):
    """Invalid project configuration or dependency listing."""
