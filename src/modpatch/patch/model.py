"""In-memory model of the module graph overrides of the modules being compiled."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from modpatch.errors import PatchSyntaxError
from modpatch.model import OrderedSet
from modpatch.options import Options
from modpatch.patch.classifier import add_test_module_path
from modpatch.patch.parser import ParsedPatch, parse_patch
from modpatch.resolvers.base import DependencyView

logger = logging.getLogger(__name__)


def _write(option: str, prefix: str | None, values: OrderedSet, target: Options) -> None:
    """Write ``--option [prefix=]v1,v2,...`` unless *values* is empty."""
    if values:
        joined = ",".join(values)
        if prefix is not None:
            joined = f"{prefix}={joined}"
        target.add_if_non_blank(f"--{option}", joined)


def _write_qualified(
    option: str, module: str, values: dict[str, OrderedSet], target: Options
) -> None:
    for package, modules in values.items():
        _write(option, f"{module}/{package}", modules, target)


class ModuleGraphContext:
    """State shared by all the module patches of one compilation unit.

    There is only one ``--add-modules`` option for the whole compilation,
    so its values are collected here from every patch and written once.
    """

    def __init__(self) -> None:
        self.add_modules = OrderedSet()
        self.emitted = False

    def write_to(self, target: Options) -> None:
        """Write ``--add-modules`` on the first call, then drain the set."""
        if self.emitted:
            return
        _write("add-modules", None, self.add_modules, target)
        self.add_modules.clear()
        self.emitted = True


class PatchOptions(Protocol):
    """Something that contributes module options for one module."""

    @property
    def module_name(self) -> str | None: ...

    def write_to(self, target: Options, *, opens: bool) -> None: ...


class ModulePatch:
    """Overrides of the module graph for one module.

    Created with a default module name before the ``module-info-patch.txt``
    file (if any) is loaded. Without a patch file, the module behaves as if
    it declared ``add-modules TEST-MODULE-PATH`` and
    ``add-reads TEST-MODULE-PATH``.
    """

    def __init__(self, default_module: str | None, context: ModuleGraphContext) -> None:
        self.module_name: str | None = None
        if default_module is not None and default_module.strip():
            self.module_name = default_module
        self.context = context
        self.limit_modules = OrderedSet()
        self.add_reads = OrderedSet()
        self.add_exports: dict[str, OrderedSet] = {}
        self.add_opens: dict[str, OrderedSet] = {}
        self.add_all_test_module_path = True
        self.read_all_test_module_path = True
        self.exports_to_test_module_path = OrderedSet()
        # Filled by dependency classification for the packages above.
        self.test_modules = OrderedSet()

    @property
    def add_modules(self) -> OrderedSet:
        return self.context.add_modules

    def load(self, text: str) -> None:
        """Parse *text* and merge its declarations into this patch."""
        self.apply(parse_patch(text))

    def load_file(self, path: Path) -> None:
        """Load a ``module-info-patch.txt`` file.

        ``OSError`` is propagated unchanged; syntax errors name *path*.
        """
        text = path.read_text(encoding="utf-8")
        try:
            self.load(text)
        except PatchSyntaxError as e:
            raise e.with_path(path) from None
        logger.debug("Loaded %s for module %s", path, self.module_name)

    def apply(self, parsed: ParsedPatch) -> None:
        """Merge a parsed patch file into this patch."""
        self.module_name = parsed.module_name
        self.add_all_test_module_path = parsed.add_all_test_module_path
        self.read_all_test_module_path = parsed.read_all_test_module_path
        self.context.add_modules |= parsed.add_modules
        self.limit_modules |= parsed.limit_modules
        self.add_reads |= parsed.add_reads
        for package, modules in parsed.add_exports.items():
            targets = self.add_exports.setdefault(package, OrderedSet())
            targets |= modules
        for package, modules in parsed.add_opens.items():
            targets = self.add_opens.setdefault(package, OrderedSet())
            targets |= modules
        self.exports_to_test_module_path |= parsed.exports_to_test_module_path

    def add_test_module_path(
        self, dependencies: DependencyView | None, *, runtime: bool
    ) -> None:
        """Expand the ``TEST-MODULE-PATH`` shorthands with resolved modules."""
        add_test_module_path(self, dependencies, runtime=runtime)

    def with_same_reads(self, other_module: str | None) -> ReadsOnlyPatch | None:
        """Return a patch for *other_module* sharing this patch's reads.

        Returns None if *other_module* is None or blank.
        """
        if other_module is None or not other_module.strip():
            return None
        return ReadsOnlyPatch(other_module, self.add_reads)

    def write_to(self, target: Options, *, opens: bool) -> None:
        """Write the options of this patch.

        ``--add-opens`` is written only if *opens* is True.
        """
        self.context.write_to(target)
        _write("limit-modules", None, self.limit_modules, target)
        if self.module_name is not None:
            _write("add-reads", self.module_name, self.add_reads, target)
            for package, modules in self.add_exports.items():
                if package in self.exports_to_test_module_path:
                    modules = OrderedSet([*modules, *self.test_modules])
                _write("add-exports", f"{self.module_name}/{package}", modules, target)
            if opens:
                _write_qualified("add-opens", self.module_name, self.add_opens, target)

    def __repr__(self) -> str:
        return f"ModulePatch({self.module_name!r})"


class ReadsOnlyPatch:
    """A module without its own patch file, reading what another module reads.

    The ``add_reads`` set is shared with the patch this one derives from,
    so modules added to it later by dependency classification are seen here
    as well.
    """

    def __init__(self, module_name: str, add_reads: OrderedSet) -> None:
        self.module_name = module_name
        self.add_reads = add_reads

    def write_to(self, target: Options, *, opens: bool) -> None:
        _write("add-reads", self.module_name, self.add_reads, target)

    def __repr__(self) -> str:
        return f"ReadsOnlyPatch({self.module_name!r})"
