"""Read module names and descriptors from sources, class directories and jars.

Compiled ``module-info.class`` files are decoded by ``javap``, which must be
on ``PATH`` when a modular artifact is inspected. Source ``module-info.java``
files are parsed with tree-sitter-java.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import zipfile
from pathlib import Path

from modpatch.errors import ModuleDescriptorError
from modpatch.model import ModuleDescriptor

logger = logging.getLogger(__name__)

MODULE_INFO_CLASS = "module-info.class"
MODULE_INFO_JAVA = "module-info.java"

# javap prints: [open] module <name>[@<version>] {
_MODULE_RE = re.compile(r"^\s*(?:open\s+)?module\s+([\w.$]+)(?:@\S*)?\s*\{", re.MULTILINE)

# javap prints: requires [transitive] [static] <name>;
_REQUIRES_RE = re.compile(
    r"^\s*requires\s+(?:(?:transitive|static|mandated|synthetic)\s+)*([\w.$]+)\s*;",
    re.MULTILINE,
)

_VERSIONED_MODULE_INFO_RE = re.compile(r"^META-INF/versions/(\d+)/module-info\.class$")


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def has_module_declaration(root: Path) -> bool:
    """Return True if the source *root* contains a ``module-info.java``."""
    return (root / MODULE_INFO_JAVA).is_file()


def read_source_module_name(root: Path) -> str | None:
    """Return the module declared by ``module-info.java`` in *root*, if any."""
    module_info = root / MODULE_INFO_JAVA
    if not module_info.is_file():
        return None

    import tree_sitter_java as tsjava
    from tree_sitter import Language, Parser

    parser = Parser(Language(tsjava.language()))
    tree = parser.parse(module_info.read_bytes())
    for node in tree.root_node.children:
        if node.type != "module_declaration":
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None:
            break
        # Whitespace is allowed around the dots of a qualified name
        name = "".join(name_node.text.decode("utf-8").split())
        logger.debug("%s declares module %s", module_info, name)
        return name
    logger.debug("No module declaration in %s", module_info)
    return None


# ---------------------------------------------------------------------------
# Compiled artifacts
# ---------------------------------------------------------------------------


def parse_javap_module(text: str) -> ModuleDescriptor | None:
    """Extract the module name and requirements from ``javap`` output."""
    m = _MODULE_RE.search(text)
    if m is None:
        return None
    requires = tuple(dict.fromkeys(_REQUIRES_RE.findall(text)))
    return ModuleDescriptor(name=m.group(1), requires=requires)


def _run_javap(target: str) -> str:
    javap_path = shutil.which("javap")
    if not javap_path:
        raise ModuleDescriptorError(
            f"javap not found on PATH, cannot read the module descriptor of {target}. "
            "Ensure a JDK is installed."
        )
    result = subprocess.run(
        [javap_path, target],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        msg = result.stderr.strip() or result.stdout.strip()
        raise ModuleDescriptorError(f"javap failed for {target}: {msg}")
    return result.stdout


def _describe_class_file(target: str) -> ModuleDescriptor:
    descriptor = parse_javap_module(_run_javap(target))
    if descriptor is None:
        raise ModuleDescriptorError(f"No module declaration in {target}")
    return descriptor


def _manifest_attribute(manifest: str, key: str) -> str | None:
    """Return the value of a main-section attribute of a jar manifest."""
    # Continuation lines start with a single space
    text = re.sub(r"\r?\n ", "", manifest)
    for line in text.splitlines():
        if not line.strip():
            break  # End of the main section
        name, sep, value = line.partition(":")
        if sep and name.strip() == key:
            return value.strip()
    return None


def _describe_jar(path: Path) -> ModuleDescriptor | None:
    try:
        with zipfile.ZipFile(path) as jar:
            names = jar.namelist()
            manifest = None
            if "META-INF/MANIFEST.MF" in names:
                manifest = jar.read("META-INF/MANIFEST.MF").decode("utf-8", "replace")
    except zipfile.BadZipFile as e:
        raise ModuleDescriptorError(f"Not a valid jar file: {path}") from e

    entry = None
    if MODULE_INFO_CLASS in names:
        entry = MODULE_INFO_CLASS
    else:
        versioned = []
        for name in names:
            m = _VERSIONED_MODULE_INFO_RE.match(name)
            if m:
                versioned.append((int(m.group(1)), name))
        if versioned:
            entry = max(versioned)[1]
    if entry is not None:
        return _describe_class_file(f"jar:{path.resolve().as_uri()}!/{entry}")

    if manifest is not None:
        name = _manifest_attribute(manifest, "Automatic-Module-Name")
        if name:
            logger.debug("%s is automatic module %s", path.name, name)
            return ModuleDescriptor(name=name, automatic=True)
    return None


def describe_module(path: Path) -> ModuleDescriptor | None:
    """Return the module descriptor of a class directory or jar file.

    Returns None for an artifact that is not a module (it belongs on the
    class path). Jars without ``module-info.class`` but with an
    ``Automatic-Module-Name`` manifest attribute are automatic modules
    without requirements.

    Raises:
        FileNotFoundError: if *path* does not exist.
        ModuleDescriptorError: if a ``module-info.class`` cannot be read.
    """
    if path.is_dir():
        module_info = path / MODULE_INFO_CLASS
        if module_info.is_file():
            return _describe_class_file(str(module_info))
        return None
    if not path.exists():
        raise FileNotFoundError(f"No such artifact: {path}")
    if path.suffix.lower() in (".jar", ".zip") or zipfile.is_zipfile(path):
        return _describe_jar(path)
    return None
