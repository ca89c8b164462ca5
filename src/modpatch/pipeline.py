"""Orchestrator: discover → load patches → classify → emit → partition."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from modpatch.config import ProjectConfig, load_config
from modpatch.options import Options
from modpatch.patch import (
    PATCH_FILE_NAME,
    ModuleGraphContext,
    ModulePatch,
    PatchOptions,
)
from modpatch.resolvers import (
    DependencyView,
    MavenDependencyView,
    StaticDependencyView,
)
from modpatch.resolvers.module_info import (
    describe_module,
    has_module_declaration,
    read_source_module_name,
)
from modpatch.sources import (
    SourceDirectory,
    SourcesForRelease,
    discover_sources,
    group_by_release_and_module,
)

logger = logging.getLogger(__name__)


@dataclass
class CompilationPlan:
    """Everything needed to invoke the compiler for one compilation unit."""

    options: Options
    releases: list[SourcesForRelease]
    patches: list[PatchOptions] = field(default_factory=list)
    test: bool = False

    def to_dict(self) -> dict:
        """Plain-data form of the plan, for serialization."""
        return {
            "test": self.test,
            "options": self.options.as_args(),
            "modules": [p.module_name for p in self.patches if p.module_name],
            "releases": [
                {
                    "release": group.release,
                    "output-directories": {
                        module: str(path)
                        for module, path in group.output_directories().items()
                    },
                    "roots": {
                        module: [str(root) for root in roots]
                        for module, roots in group.roots.items()
                    },
                    "files": [str(f) for f in group.files],
                }
                for group in self.releases
            ],
        }


def _module_roots(
    directories: Sequence[SourceDirectory], default_module: str | None
) -> dict[str, list[Path]]:
    """Map module names, in first-seen order, to their source roots."""
    modules: dict[str, list[Path]] = {}
    for directory in directories:
        name = directory.module_name or default_module or ""
        roots = modules.setdefault(name, [])
        if directory.root not in roots:
            roots.append(directory.root)
    return modules


def _load_patches(
    modules: dict[str, list[Path]],
    context: ModuleGraphContext,
    patch_file_name: str,
) -> tuple[list[tuple[PatchOptions, list[Path]]], list[ModulePatch]]:
    """Create the patch of each module.

    Returns all patches in module order with the roots of their module, and
    the full patches among them (those for which dependency classification
    applies).
    """
    patches: list[tuple[PatchOptions, list[Path]]] = []
    full: list[ModulePatch] = []
    implicit: ModulePatch | None = None
    for name, roots in modules.items():
        patch_file = next(
            (root / patch_file_name for root in roots if (root / patch_file_name).is_file()),
            None,
        )
        if patch_file is not None:
            patch = ModulePatch(name, context)
            patch.load_file(patch_file)
            patches.append((patch, roots))
            full.append(patch)
        elif implicit is None:
            implicit = ModulePatch(name, context)
            patches.append((implicit, roots))
            full.append(implicit)
        else:
            derived = implicit.with_same_reads(name)
            if derived is not None:
                patches.append((derived, roots))
    return patches, full


def plan_compilation(
    directories: Sequence[SourceDirectory],
    dependencies: DependencyView | None = None,
    *,
    test: bool = False,
    runtime: bool = False,
    default_module: str | None = None,
    patch_file_name: str = PATCH_FILE_NAME,
    excludes: Sequence[str] = (),
) -> CompilationPlan:
    """Compute the module options and release layout of *directories*."""
    releases = group_by_release_and_module(discover_sources(directories, excludes))

    modules = _module_roots(directories, default_module)
    context = ModuleGraphContext()
    patched, full = _load_patches(modules, context, patch_file_name)
    patches = [patch for patch, _ in patched]
    logger.debug("Modules: %s", list(modules))

    if test:
        for patch in full:
            patch.add_test_module_path(dependencies, runtime=runtime)

    options = Options()
    for patch in patches:
        patch.write_to(options, opens=test)

    if test:
        for patch, roots in patched:
            if patch.module_name:
                options.add_if_non_blank(
                    "--patch-module",
                    f"{patch.module_name}={os.pathsep.join(str(r) for r in roots)}",
                )
        for directory in directories:
            if has_module_declaration(directory.root):
                logger.warning(
                    "The test directory %s should not contain a module-info.java file. "
                    "Use --add-reads, --add-modules and related options instead.",
                    directory.root,
                )

    logger.debug("%d options, %d release groups", len(options), len(releases))
    return CompilationPlan(options=options, releases=releases, patches=patches, test=test)


def _source_directories(config: ProjectConfig) -> list[SourceDirectory]:
    output = config.effective_output_directory()
    return [
        SourceDirectory(source.root, output, module_name=source.module, release=source.release)
        for source in config.effective_sources()
    ]


def _default_module_name(config: ProjectConfig) -> str | None:
    """Name of the module of the roots without a configured module.

    For the main code, this is the module declared in the first source
    root with a ``module-info.java``. For the tests, this is the module
    patched by the tests, if the main code is modular.
    """
    if config.module:
        return config.module
    if not config.test:
        for source in config.effective_sources():
            name = read_source_module_name(source.root)
            if name is not None:
                return name
        return None
    main_output = config.effective_main_output_directory()
    if not main_output.is_dir():
        return None
    descriptor = describe_module(main_output)
    return descriptor.name if descriptor is not None else None


def _dependency_view(config: ProjectConfig) -> DependencyView | None:
    if config.dependencies is not None:
        return StaticDependencyView.from_yaml(config.dependencies)
    if config.pom is not None:
        return MavenDependencyView.from_pom(config.pom)
    return None


def run(
    project_dir: Path,
    *,
    test: bool | None = None,
    runtime: bool = False,
    dependencies: Path | None = None,
    pom: Path | None = None,
) -> CompilationPlan:
    """Load the configuration of *project_dir* and compute its plan."""
    project_dir = project_dir.resolve()
    config = load_config(project_dir)
    if test is not None:
        config = config.with_test(test)

    directories = _source_directories(config)
    default_module = _default_module_name(config)

    if dependencies is not None:
        view: DependencyView | None = StaticDependencyView.from_yaml(dependencies)
    elif pom is not None:
        view = MavenDependencyView.from_pom(pom)
    else:
        view = _dependency_view(config)

    return plan_compilation(
        directories,
        view,
        test=config.test,
        runtime=runtime,
        default_module=default_module,
        patch_file_name=config.patch_file,
        excludes=config.excludes,
    )
