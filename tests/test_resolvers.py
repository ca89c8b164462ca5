"""Tests for the YAML and Maven dependency views."""

from __future__ import annotations

import sys
import types
import zipfile
from pathlib import Path

import pytest

from modpatch.errors import ConfigError
from modpatch.model import Dependency, Scope
from modpatch.resolvers import MavenDependencyView, StaticDependencyView

DEPS_YAML = """\
dependencies:
  - path: lib/junit-jupiter-api.jar
    scope: test
    coordinates: org.junit.jupiter:junit-jupiter-api:5.11.0
    module: org.junit.jupiter.api
    requires: [org.opentest4j, org.junit.platform.commons]
  - path: lib/hamcrest.jar
    scope: test_only
  - path: lib/auto.jar
    scope: TEST-RUNTIME
  - path: lib/guava.jar
"""


def _write_deps(tmp_path, text=DEPS_YAML):
    path = tmp_path / "deps.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_static_view(tmp_path):
    (tmp_path / "lib").mkdir()
    with zipfile.ZipFile(tmp_path / "lib" / "auto.jar", "w") as jar:
        jar.writestr("META-INF/MANIFEST.MF", "Automatic-Module-Name: org.example.auto\n")

    view = StaticDependencyView.from_yaml(_write_deps(tmp_path))
    assert len(view) == 4
    deps = list(view.dependencies().items())
    assert [d.coordinates for d, _ in deps] == [
        "org.junit.jupiter:junit-jupiter-api:5.11.0",
        "hamcrest.jar",
        "auto.jar",
        "guava.jar",
    ]
    assert [d.scope for d, _ in deps] == [
        Scope.TEST,
        Scope.TEST_ONLY,
        Scope.TEST_RUNTIME,
        Scope.COMPILE,
    ]

    api, hamcrest, auto, guava = (path for _, path in deps)
    assert api == tmp_path / "lib" / "junit-jupiter-api.jar"
    descriptor = view.module_descriptor(api)
    assert descriptor.name == "org.junit.jupiter.api"
    assert descriptor.requires == ("org.opentest4j", "org.junit.platform.commons")
    # Missing artifacts without a declared module are unnamed
    assert view.module_name(hamcrest) is None
    assert view.module_name(guava) is None
    # Existing artifacts are inspected
    assert view.module_name(auto) == "org.example.auto"
    assert view.module_descriptor(auto).automatic


def test_static_view_empty_document(tmp_path):
    view = StaticDependencyView.from_yaml(_write_deps(tmp_path, ""))
    assert len(view) == 0


@pytest.mark.parametrize(
    "text, message",
    [
        ("- a\n- b\n", "mapping"),
        ("dependencies: lib.jar\n", "must be a list"),
        ("dependencies:\n  - scope: test\n", "has no 'path'"),
        ("dependencies:\n  - path: a.jar\n    scope: banana\n", "banana"),
        (
            "dependencies:\n  - path: a.jar\n    module: a\n    requires: b\n",
            "must be a list",
        ),
        ("dependencies: [unclosed\n", "Could not parse"),
    ],
)
def test_static_view_errors(tmp_path, text, message):
    with pytest.raises(ConfigError, match=message):
        StaticDependencyView.from_yaml(_write_deps(tmp_path, text))


def test_static_view_from_data_relative_paths():
    view = StaticDependencyView.from_data(
        {"dependencies": [{"path": "a.jar", "module": "a"}]}, base_dir=Path("/deps")
    )
    ((dependency, path),) = view.dependencies().items()
    assert dependency == Dependency("a.jar", Scope.COMPILE)
    assert path == Path("/deps/a.jar")
    assert view.module_name(path) == "a"


# -- Maven view, with a stand-in for the jgo API ------------------------------


class _Artifact:
    def __init__(self, path):
        self.path = path

    def resolve(self):
        if self.path is None:
            raise OSError("artifact not in any repository")
        return str(self.path)


class _Dep:
    def __init__(self, group, artifact, scope, path):
        self.groupId = group
        self.artifactId = artifact
        self.scope = scope
        self.artifact = _Artifact(path)


@pytest.fixture
def fake_jgo(monkeypatch):
    """Install fake ``jgo`` modules resolving to ``fake_jgo.deps``."""
    state = types.SimpleNamespace(deps=[])

    class POM:
        def __init__(self, path):
            self.path = path

    class MavenContext:
        pass

    class Model:
        def __init__(self, pom, context):
            self.pom = pom

        def dependencies(self):
            return state.deps, []

    jgo = types.ModuleType("jgo")
    maven = types.ModuleType("jgo.maven")
    maven.POM = POM
    maven.MavenContext = MavenContext
    maven.Model = Model
    jgo.maven = maven
    monkeypatch.setitem(sys.modules, "jgo", jgo)
    monkeypatch.setitem(sys.modules, "jgo.maven", maven)
    return state


def test_maven_view(tmp_path, fake_jgo):
    pom = tmp_path / "pom.xml"
    pom.write_text("<project/>", encoding="utf-8")
    fake_jgo.deps = [
        _Dep("org.junit.jupiter", "junit-jupiter-api", "test", tmp_path / "api.jar"),
        _Dep("com.example", "weird", "banana", tmp_path / "weird.jar"),
        _Dep("com.example", "lost", "test", None),
        _Dep("com.google.guava", "guava", None, tmp_path / "guava.jar"),
    ]
    view = MavenDependencyView.from_pom(pom)
    assert list(view.dependencies().items()) == [
        (Dependency("org.junit.jupiter:junit-jupiter-api", Scope.TEST), tmp_path / "api.jar"),
        (Dependency("com.google.guava:guava", Scope.COMPILE), tmp_path / "guava.jar"),
    ]


def test_maven_view_missing_pom(tmp_path, fake_jgo):
    with pytest.raises(FileNotFoundError):
        MavenDependencyView.from_pom(tmp_path / "pom.xml")


def test_maven_view_without_jgo(tmp_path, monkeypatch):
    # A None entry makes the import fail
    monkeypatch.setitem(sys.modules, "jgo", None)
    monkeypatch.setitem(sys.modules, "jgo.maven", None)
    with pytest.raises(ConfigError, match="modpatch\\[maven\\]"):
        MavenDependencyView.from_pom(tmp_path / "pom.xml")


def test_maven_view_propagates_unexpected_errors(tmp_path, fake_jgo):
    pom = tmp_path / "pom.xml"
    pom.write_text("<project/>", encoding="utf-8")
    dep = _Dep("com.example", "broken", "test", tmp_path / "broken.jar")

    def resolve():
        raise TypeError("unsupported artifact type")

    dep.artifact.resolve = resolve
    fake_jgo.deps = [dep]
    with pytest.raises(TypeError, match="unsupported artifact type"):
        MavenDependencyView.from_pom(pom)
