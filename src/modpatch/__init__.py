"""modpatch: javac module options and multi-release layout for Java projects."""

from __future__ import annotations

from modpatch.errors import (
    ConfigError,
    ModPatchError,
    ModuleDescriptorError,
    PatchSyntaxError,
)
from modpatch.options import Options
from modpatch.patch import ModuleGraphContext, ModulePatch, ReadsOnlyPatch
from modpatch.pipeline import CompilationPlan, plan_compilation, run
from modpatch.sources import SourceDirectory, SourcesForRelease

__all__ = [
    "CompilationPlan",
    "ConfigError",
    "ModPatchError",
    "ModuleDescriptorError",
    "ModuleGraphContext",
    "ModulePatch",
    "Options",
    "PatchSyntaxError",
    "ReadsOnlyPatch",
    "SourceDirectory",
    "SourcesForRelease",
    "plan_compilation",
    "run",
]
