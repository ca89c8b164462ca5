"""Reading and applying ``module-info-patch.txt`` files."""

from __future__ import annotations

from modpatch.patch.model import (
    ModuleGraphContext,
    ModulePatch,
    PatchOptions,
    ReadsOnlyPatch,
)
from modpatch.patch.parser import (
    ALL_MODULE_PATH,
    ALL_UNNAMED,
    TEST_MODULE_PATH,
    ParsedPatch,
    parse_patch,
)

__all__ = [
    "ALL_MODULE_PATH",
    "ALL_UNNAMED",
    "PATCH_FILE_NAME",
    "TEST_MODULE_PATH",
    "ModuleGraphContext",
    "ModulePatch",
    "ParsedPatch",
    "PatchOptions",
    "ReadsOnlyPatch",
    "parse_patch",
]

# Conventional name of the patch file in a source root.
PATCH_FILE_NAME = "module-info-patch.txt"
