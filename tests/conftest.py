"""Shared fixtures: small resolved forests mirroring real Gradle builds."""

from __future__ import annotations

import pytest
from forests import (
    java_library,
    kotlin_stdlib,
    project_dep,
    rxandroid,
    rxjava,
)

from depgraph.model import Configuration, ProjectRef


@pytest.fixture
def single_empty() -> ProjectRef:
    return java_library("singleempty")


@pytest.fixture
def single_project() -> ProjectRef:
    return java_library("single", api=[kotlin_stdlib()], implementation=[rxjava()])


@pytest.fixture
def multi_project() -> ProjectRef:
    return ProjectRef(
        name="multi",
        subprojects=[
            java_library("multi1", api=[kotlin_stdlib()], implementation=[rxjava()]),
            java_library("multi2", implementation=[rxjava(), rxandroid()]),
        ],
    )


@pytest.fixture
def linked_projects() -> ProjectRef:
    """app -> lib1, lib2; lib1 -> lib (api), kotlin (implementation); lib2 -> lib."""

    def lib():
        return project_dep("lib", rxjava())

    app = ProjectRef(
        name="app",
        path=":app",
        configurations=[
            Configuration(
                "compileClasspath",
                [project_dep("lib1", lib()), project_dep("lib2", lib())],
            ),
            Configuration(
                "runtimeClasspath",
                [
                    project_dep("lib1", lib(), kotlin_stdlib()),
                    project_dep("lib2", lib()),
                ],
            ),
        ],
    )
    lib1 = java_library("lib1", api=[lib()], implementation=[kotlin_stdlib()])
    lib2 = java_library("lib2", api=[lib()])
    return ProjectRef(
        name="root",
        path=":",
        subprojects=[app, java_library("lib", api=[rxjava()]), lib1, lib2],
    )
