"""Expand the ``TEST-MODULE-PATH`` shorthand from resolved test dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from modpatch.model import Scope
from modpatch.patch.parser import ALL_UNNAMED
from modpatch.resolvers.base import DependencyView

if TYPE_CHECKING:
    from modpatch.patch.model import ModulePatch

logger = logging.getLogger(__name__)


def applies_to(scope: Scope, *, runtime: bool) -> bool:
    """Return True if a dependency of *scope* is on the test module path.

    ``test-only`` dependencies are for compilation and ``test-runtime``
    dependencies are for execution. Non-test dependencies are already
    required by the main ``module-info``.
    """
    if scope is Scope.TEST:
        return True
    if scope is Scope.TEST_ONLY:
        return not runtime
    if scope is Scope.TEST_RUNTIME:
        return runtime
    return False


def add_test_module_path(
    patch: ModulePatch, dependencies: DependencyView | None, *, runtime: bool
) -> None:
    """Add the test dependencies to ``--add-modules`` and ``--add-reads``.

    Dependencies are added only if the patch requested it with the
    ``TEST-MODULE-PATH`` keyword, or implicitly because the module has no
    patch file. Packages exported to ``TEST-MODULE-PATH`` are exported to
    every test module, named or not. Does nothing if *dependencies* is None.

    Modules required by a module already added are not added themselves.
    This is not needed for correctness, but keeps the command line short.
    """
    if dependencies is None:
        return
    add_all = patch.add_all_test_module_path
    read_all = patch.read_all_test_module_path
    exports = bool(patch.exports_to_test_module_path)
    if not (add_all or read_all or exports):
        return

    done: set[str] = set()  # Added modules and their requirements.
    for dependency, path in dependencies.dependencies().items():
        if not applies_to(dependency.scope, runtime=runtime):
            continue
        name = dependencies.module_name(path)
        if exports:
            patch.test_modules.add(ALL_UNNAMED if name is None else name)
        if name is None:
            if read_all:
                patch.add_reads.add(ALL_UNNAMED)
            continue
        if name in done:
            continue
        done.add(name)
        modified = False
        if add_all:
            modified |= patch.add_modules.add_new(name)
        if read_all:
            modified |= patch.add_reads.add_new(name)
        if modified:
            descriptor = dependencies.module_descriptor(path)
            if descriptor is not None:
                done.update(descriptor.requires)
        else:
            logger.debug("Module %s of %s already present", name, dependency.coordinates)

    logger.debug(
        "Test module path of %s: %d added, %d read",
        patch.module_name,
        len(patch.add_modules),
        len(patch.add_reads),
    )
