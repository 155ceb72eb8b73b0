"""Tests for DotGenerator traversal and output."""

from textwrap import dedent

import pytest
from forests import (
    java_library,
    junit,
    kotlin_stdlib,
    module,
    project_dep,
    rxandroid,
    rxjava,
)

from depgraph.config import ALL
from depgraph.dot.graph import GraphLabel, Justification, Location
from depgraph.dot.shape import Shape
from depgraph.errors import MalformedDependencyError, UnknownProjectError
from depgraph.generator import DotGenerator
from depgraph.model import Configuration, ProjectRef, ResolvedDependency


def dot(text: str) -> str:
    return dedent(text).strip()


class TestSingleProject:
    def test_empty_project(self, single_empty):
        assert DotGenerator(single_empty, ALL).generate() == dot(
            """
            digraph "G" {
            "singleempty" ["shape"="rectangle"]
            }
            """
        )

    def test_test_dependencies_are_excluded(self):
        project = java_library("singleempty", test=[junit()])

        assert DotGenerator(project, ALL).generate() == dot(
            """
            digraph "G" {
            "singleempty" ["shape"="rectangle"]
            }
            """
        )

    def test_no_projects(self, single_empty):
        generator = ALL.copy(include_project=lambda _: False)

        assert DotGenerator(single_empty, generator).generate() == 'digraph "G" {\n}'

    def test_header(self, single_empty):
        label = (
            GraphLabel("my custom header")
            .locate(Location.TOP)
            .justify(Justification.LEFT)
        )
        generator = ALL.copy(graph_label=label)

        assert DotGenerator(single_empty, generator).generate() == dot(
            """
            digraph "G" {
            "labeljust"="l"
            "labelloc"="t"
            "label"="my custom header"
            "singleempty" ["shape"="rectangle"]
            }
            """
        )

    def test_project_node_formatting(self, single_empty):
        generator = ALL.copy(
            project_node=lambda node, _: node.add(
                Shape.EGG, style="dotted", color="#ff0099"
            )
        )

        assert DotGenerator(single_empty, generator).generate() == dot(
            """
            digraph "G" {
            "singleempty" ["shape"="egg","style"="dotted","color"="#ff0099"]
            }
            """
        )

    def test_all(self, single_project):
        assert DotGenerator(single_project, ALL).generate() == dot(
            """
            digraph "G" {
            "single" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "reactive-streams" ["shape"="rectangle"]
            "single" -> "kotlin-stdlib"
            "single" -> "rxjava"
            "kotlin-stdlib" -> "jetbrains-annotations"
            "rxjava" -> "reactive-streams"
            }
            """
        )

    def test_dependency_node_formatting(self, single_project):
        colors = {"rxjava": "red", "reactive-streams": "blue"}

        def dependency_node(node, dependency):
            if dependency.artifact in colors:
                node.add(style="filled", color=colors[dependency.artifact])
            return node

        generator = ALL.copy(dependency_node=dependency_node)

        assert DotGenerator(single_project, generator).generate() == dot(
            """
            digraph "G" {
            "single" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle","style"="filled","color"="red"]
            "reactive-streams" ["shape"="rectangle","style"="filled","color"="blue"]
            "single" -> "kotlin-stdlib"
            "single" -> "rxjava"
            "kotlin-stdlib" -> "jetbrains-annotations"
            "rxjava" -> "reactive-streams"
            }
            """
        )

    def test_no_children(self, single_project):
        generator = ALL.copy(children=lambda _: False)

        assert DotGenerator(single_project, generator).generate() == dot(
            """
            digraph "G" {
            "single" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "single" -> "kotlin-stdlib"
            "single" -> "rxjava"
            }
            """
        )

    def test_filter_rxjava_out(self, single_project):
        generator = ALL.copy(include=lambda d: d.group != "io.reactivex.rxjava2")

        assert DotGenerator(single_project, generator).generate() == dot(
            """
            digraph "G" {
            "single" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "single" -> "kotlin-stdlib"
            "kotlin-stdlib" -> "jetbrains-annotations"
            }
            """
        )

    def test_no_duplicate_dependency_connections(self):
        # Both RxJava and RxAndroid point transitively on reactive-streams.
        project = java_library(
            "single", api=[kotlin_stdlib()], implementation=[rxjava(), rxandroid()]
        )

        assert DotGenerator(project, ALL).generate() == dot(
            """
            digraph "G" {
            "single" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "reactive-streams" ["shape"="rectangle"]
            "rxandroid" ["shape"="rectangle"]
            "single" -> "kotlin-stdlib"
            "single" -> "rxjava"
            "single" -> "rxandroid"
            "kotlin-stdlib" -> "jetbrains-annotations"
            "rxjava" -> "reactive-streams"
            "rxandroid" -> "rxjava"
            }
            """
        )

    def test_children_only_walked_once(self):
        walked = []

        def children(dependency):
            walked.append(dependency.artifact)
            return True

        project = java_library("single", implementation=[rxandroid(), rxjava()])
        DotGenerator(project, ALL.copy(children=children)).generate_graph()

        assert walked.count("reactive-streams") == 1


class TestMultiProject:
    def test_all(self, multi_project):
        assert DotGenerator(multi_project, ALL).generate() == dot(
            """
            digraph "G" {
            "multi1" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "reactive-streams" ["shape"="rectangle"]
            "multi2" ["shape"="rectangle"]
            "rxandroid" ["shape"="rectangle"]
            "multi1" -> "kotlin-stdlib"
            "multi1" -> "rxjava"
            "kotlin-stdlib" -> "jetbrains-annotations"
            "rxjava" -> "reactive-streams"
            "multi2" -> "rxjava"
            "multi2" -> "rxandroid"
            "rxandroid" -> "rxjava"
            }
            """
        )

    def test_project_dependencies(self, linked_projects):
        assert DotGenerator(linked_projects, ALL).generate() == dot(
            """
            digraph "G" {
            "app" ["shape"="rectangle"]
            "lib1" ["shape"="rectangle"]
            "lib" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "reactive-streams" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "lib2" ["shape"="rectangle"]
            "app" -> "lib1"
            "app" -> "lib2"
            "lib1" -> "lib"
            "lib1" -> "kotlin-stdlib"
            "lib" -> "rxjava"
            "rxjava" -> "reactive-streams"
            "kotlin-stdlib" -> "jetbrains-annotations"
            "lib2" -> "lib"
            }
            """
        )

    def test_excluded_project_is_a_hard_cut(self, linked_projects):
        generator = ALL.copy(include_project=lambda p: p.name != "lib")
        text = DotGenerator(linked_projects, generator).generate()

        assert text == dot(
            """
            digraph "G" {
            "app" ["shape"="rectangle"]
            "lib1" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "lib2" ["shape"="rectangle"]
            "app" -> "lib1"
            "app" -> "lib2"
            "lib1" -> "kotlin-stdlib"
            "kotlin-stdlib" -> "jetbrains-annotations"
            }
            """
        )
        assert '"lib"' not in text

    def test_project_node_callback_applies_to_projects(self, linked_projects):
        generator = ALL.copy(project_node=lambda node, _: node.add(Shape.BOX3D))
        graph = DotGenerator(linked_projects, generator).generate_graph()

        shapes = {n.key: n.attributes["shape"] for n in graph.ordered_nodes()}
        assert shapes["lib"] == shapes["lib1"] == shapes["lib2"] == "box3d"
        assert shapes["rxjava"] == "rectangle"


def android_project(configurations: dict[str, list[ResolvedDependency]]) -> ProjectRef:
    return ProjectRef(
        name="android",
        configurations=[
            Configuration(name, deps) for name, deps in configurations.items()
        ],
    )


class TestAndroidProject:
    def test_architecture_components(self):
        def annotations():
            return module("com.android.support:support-annotations:26.1.0")

        room = module(
            "android.arch.persistence.room:runtime:1.0.0",
            module("android.arch.persistence.room:common:1.0.0", annotations()),
            module(
                "android.arch.persistence:db-framework:1.0.0",
                module("android.arch.persistence:db:1.0.0", annotations()),
                annotations(),
            ),
            module("android.arch.persistence:db:1.0.0", annotations()),
            module(
                "android.arch.core:runtime:1.0.0",
                module("android.arch.core:common:1.0.0", annotations()),
                annotations(),
            ),
            module(
                "com.android.support:support-core-utils:26.1.0",
                module("com.android.support:support-compat:26.1.0", annotations()),
                annotations(),
            ),
        )
        project = android_project(
            {
                "debugCompileClasspath": [room],
                "debugRuntimeClasspath": [room],
                "debugUnitTestCompileClasspath": [room, junit()],
            }
        )

        assert DotGenerator(project, ALL).generate() == dot(
            """
            digraph "G" {
            "android" ["shape"="rectangle"]
            "persistence-room-runtime" ["shape"="rectangle"]
            "persistence-room-common" ["shape"="rectangle"]
            "support-annotations" ["shape"="rectangle"]
            "persistence-db-framework" ["shape"="rectangle"]
            "persistence-db" ["shape"="rectangle"]
            "core-runtime" ["shape"="rectangle"]
            "core-common" ["shape"="rectangle"]
            "support-core-utils" ["shape"="rectangle"]
            "support-compat" ["shape"="rectangle"]
            "android" -> "persistence-room-runtime"
            "persistence-room-runtime" -> "persistence-room-common"
            "persistence-room-runtime" -> "persistence-db-framework"
            "persistence-room-runtime" -> "persistence-db"
            "persistence-room-runtime" -> "core-runtime"
            "persistence-room-runtime" -> "support-core-utils"
            "persistence-room-common" -> "support-annotations"
            "persistence-db-framework" -> "persistence-db"
            "persistence-db-framework" -> "support-annotations"
            "persistence-db" -> "support-annotations"
            "core-runtime" -> "core-common"
            "core-runtime" -> "support-annotations"
            "core-common" -> "support-annotations"
            "support-core-utils" -> "support-compat"
            "support-core-utils" -> "support-annotations"
            "support-compat" -> "support-annotations"
            }
            """
        )

    def test_sqldelight(self):
        sqldelight = module(
            "com.squareup.sqldelight:runtime:0.6.1",
            module("com.android.support:support-annotations:23.1.1"),
        )
        project = android_project({"releaseCompileClasspath": [sqldelight]})

        assert DotGenerator(project, ALL).generate() == dot(
            """
            digraph "G" {
            "android" ["shape"="rectangle"]
            "sqldelight-runtime" ["shape"="rectangle"]
            "support-annotations" ["shape"="rectangle"]
            "android" -> "sqldelight-runtime"
            "sqldelight-runtime" -> "support-annotations"
            }
            """
        )

    def test_include_all_flavors_by_default(self):
        project = android_project(
            {
                "flavor1DebugCompileClasspath": [rxandroid()],
                "flavor1DebugRuntimeClasspath": [rxandroid()],
                "flavor1DebugAndroidTestCompileClasspath": [rxandroid(), junit()],
                "flavor1ReleaseCompileClasspath": [rxandroid()],
                "flavor2DebugCompileClasspath": [rxjava()],
                "flavor2DebugUnitTestRuntimeClasspath": [rxjava(), junit()],
                "flavor2ReleaseCompileClasspath": [kotlin_stdlib()],
                "flavor2ReleaseRuntimeClasspath": [kotlin_stdlib()],
            }
        )

        assert DotGenerator(project, ALL).generate() == dot(
            """
            digraph "G" {
            "android" ["shape"="rectangle"]
            "rxandroid" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "reactive-streams" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "android" -> "rxandroid"
            "android" -> "rxjava"
            "android" -> "kotlin-stdlib"
            "rxandroid" -> "rxjava"
            "rxjava" -> "reactive-streams"
            "kotlin-stdlib" -> "jetbrains-annotations"
            }
            """
        )

    def test_include_only_staging_compile_classpath(self):
        project = android_project(
            {
                "debugCompileClasspath": [rxjava()],
                "releaseCompileClasspath": [rxandroid()],
                "stagingCompileClasspath": [kotlin_stdlib()],
            }
        )
        generator = ALL.copy(
            include_configuration=lambda c: c.name == "stagingCompileClasspath"
        )

        assert DotGenerator(project, generator).generate() == dot(
            """
            digraph "G" {
            "android" ["shape"="rectangle"]
            "kotlin-stdlib" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "android" -> "kotlin-stdlib"
            "kotlin-stdlib" -> "jetbrains-annotations"
            }
            """
        )

    @pytest.mark.parametrize(
        "configuration",
        ["debugUnitTestCompileClasspath", "debugAndroidTestRuntimeClasspath"],
    )
    def test_test_dependencies_are_excluded(self, configuration):
        project = android_project({configuration: [junit()]})

        assert DotGenerator(project, ALL).generate() == dot(
            """
            digraph "G" {
            "android" ["shape"="rectangle"]
            }
            """
        )


class TestTraversalGuarantees:
    def test_output_is_deterministic(self, linked_projects):
        first = DotGenerator(linked_projects, ALL).generate()
        generator = DotGenerator(linked_projects, ALL)

        assert generator.generate() == first
        assert generator.generate() == first

    def test_each_call_builds_a_fresh_graph(self, single_project):
        generator = DotGenerator(single_project, ALL)

        assert generator.generate_graph() is not generator.generate_graph()

    def test_versions_collapse_into_one_node(self):
        project = java_library(
            "single",
            implementation=[
                module("io.reactivex.rxjava2:rxjava:2.1.10"),
                module(
                    "io.reactivex.rxjava2:rxandroid:2.0.2",
                    module("io.reactivex.rxjava2:rxjava:2.1.7"),
                ),
            ],
        )
        graph = DotGenerator(project, ALL).generate_graph()

        assert [n.key for n in graph.ordered_nodes()] == [
            "single",
            "io.reactivex.rxjava2:rxjava",
            "io.reactivex.rxjava2:rxandroid",
        ]

    def test_cyclic_trees_terminate(self):
        a = module("com.example:a:1")
        b = module("com.example:b:1", a)
        a.children.append(b)
        project = java_library("single", implementation=[a])

        graph = DotGenerator(project, ALL).generate_graph()

        assert graph.has_edge("com.example:a", "com.example:b")
        assert graph.has_edge("com.example:b", "com.example:a")

    def test_unresolvable_configurations_are_skipped(self):
        project = ProjectRef(
            name="single",
            configurations=[
                Configuration("compileClasspath", [rxjava()], resolvable=False)
            ],
        )

        assert len(DotGenerator(project, ALL).generate_graph()) == 1

    def test_nested_subprojects_are_walked(self):
        core = java_library(
            "core", implementation=[module("org.jetbrains:annotations:13.0")]
        )
        lib = java_library("lib")
        lib.subprojects.append(core)
        root = ProjectRef(name="root", path=":", subprojects=[lib])

        assert DotGenerator(root, ALL).generate() == dot(
            """
            digraph "G" {
            "lib" ["shape"="rectangle"]
            "core" ["shape"="rectangle"]
            "jetbrains-annotations" ["shape"="rectangle"]
            "core" -> "jetbrains-annotations"
            }
            """
        )

    def test_colliding_labels_fall_back_to_the_key(self):
        project = java_library(
            "single",
            implementation=[
                module("io.reactivex.rxjava2:rxjava:2.1.10"),
                module("io.reactivex.rxjava3:rxjava:3.0.0"),
            ],
        )

        output = DotGenerator(project, ALL).generate()

        assert output == dot(
            """
            digraph "G" {
            "single" ["shape"="rectangle"]
            "rxjava" ["shape"="rectangle"]
            "io.reactivex.rxjava3:rxjava" ["shape"="rectangle"]
            "single" -> "rxjava"
            "single" -> "io.reactivex.rxjava3:rxjava"
            }
            """
        )
        assert output.count('"single" -> "rxjava"') == 1

    def test_root_with_subprojects_is_not_drawn(self, multi_project):
        graph = DotGenerator(multi_project, ALL).generate_graph()

        assert "multi" not in graph
        assert graph.roots == ["multi1", "multi2"]


class TestErrors:
    def test_malformed_dependency(self):
        project = java_library(
            "single", implementation=[ResolvedDependency(group="com.example")]
        )

        with pytest.raises(MalformedDependencyError) as excinfo:
            DotGenerator(project, ALL).generate()
        assert excinfo.value.parent == "single"

    def test_malformed_transitive_dependency(self):
        broken = module("com.example:a:1", ResolvedDependency(artifact="b"))
        project = java_library("single", implementation=[broken])

        with pytest.raises(MalformedDependencyError):
            DotGenerator(project, ALL).generate()

    def test_unknown_project_dependency(self):
        project = java_library("single", implementation=[project_dep("missing")])

        with pytest.raises(UnknownProjectError):
            DotGenerator(project, ALL).generate()

    def test_callback_errors_propagate(self, single_project):
        def include(_):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            DotGenerator(single_project, ALL.copy(include=include)).generate()
