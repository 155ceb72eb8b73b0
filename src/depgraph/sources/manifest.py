"""Load a resolved project forest from a YAML or JSON manifest.

Example::

    project:
      name: multi
      subprojects:
        - name: app
          configurations:
            compileClasspath:
              - project: lib
              - module: org.jetbrains.kotlin:kotlin-stdlib:1.2.30
                dependencies:
                  - org.jetbrains:annotations:13.0
        - name: lib
          configurations:
            api:
              resolvable: false
            compileClasspath:
              - io.reactivex.rxjava2:rxjava:2.1.10
"""

from __future__ import annotations

import logging
from pathlib import Path

from depgraph.errors import SourceError
from depgraph.model import Configuration, ProjectRef, ResolvedDependency

logger = logging.getLogger(__name__)

MANIFEST_NAMES = ("depgraph.yaml", "depgraph.yml", "depgraph.json")


def find_manifest(project_dir: Path) -> Path | None:
    for name in MANIFEST_NAMES:
        path = project_dir / name
        if path.exists():
            return path
    return None


def _parse_coordinate(text: str, where: str) -> ResolvedDependency:
    parts = text.strip().split(":")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise SourceError(f"{where}: expected 'group:artifact[:version]', got {text!r}")
    version = parts[2] if len(parts) > 2 and parts[2] else None
    return ResolvedDependency(group=parts[0], artifact=parts[1], version=version)


def _parse_dependency(entry, where: str) -> ResolvedDependency:
    if isinstance(entry, str):
        return _parse_coordinate(entry, where)
    if not isinstance(entry, dict):
        raise SourceError(f"{where}: unexpected dependency entry {entry!r}")

    if "project" in entry:
        dependency = ResolvedDependency(project=str(entry["project"]))
    elif "module" in entry:
        dependency = _parse_coordinate(str(entry["module"]), where)
    else:
        raise SourceError(f"{where}: dependency needs 'module' or 'project': {entry!r}")

    children = entry.get("dependencies") or []
    if not isinstance(children, list):
        raise SourceError(f"{where}: 'dependencies' must be a list")
    dependency.children = [
        _parse_dependency(child, f"{where} > {dependency.coordinate}")
        for child in children
    ]
    return dependency


def _parse_configuration(name: str, body, where: str) -> Configuration:
    if body is None:
        return Configuration(name=name)
    if isinstance(body, list):
        entries, resolvable = body, True
    elif isinstance(body, dict):
        entries = body.get("dependencies") or []
        resolvable = bool(body.get("resolvable", True))
    else:
        raise SourceError(f"{where}: configuration {name!r} must be a list or table")
    return Configuration(
        name=name,
        dependencies=[_parse_dependency(e, f"{where}/{name}") for e in entries],
        resolvable=resolvable,
    )


def parse_project(
    data, where: str = "project", parent_path: str | None = None
) -> ProjectRef:
    """Build a :class:`ProjectRef` tree from decoded manifest data."""
    if not isinstance(data, dict) or not data.get("name"):
        raise SourceError(f"{where}: project entries need a 'name'")

    name = str(data["name"])
    path = ":" if parent_path is None else f"{parent_path.rstrip(':')}:{name}"
    configurations = data.get("configurations") or {}
    if not isinstance(configurations, dict):
        raise SourceError(f"{where}: 'configurations' must be a table")

    project = ProjectRef(name=name, path=path)
    project.configurations = [
        _parse_configuration(str(config_name), body, f"{where} {name}")
        for config_name, body in configurations.items()
    ]
    project.subprojects = [
        parse_project(sub, f"{where} {name}", path)
        for sub in data.get("subprojects") or []
    ]
    return project


def load_manifest(path: Path) -> ProjectRef:
    """Read *path* (YAML, or JSON which YAML accepts) into a project forest."""
    import yaml

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise SourceError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict) or "project" not in data:
        raise SourceError(f"{path}: missing top-level 'project' table")

    project = parse_project(data["project"])
    logger.debug(
        "Manifest %s: %d projects", path.name, sum(1 for _ in project.walk())
    )
    return project


class ManifestSource:
    """Load the forest from ``depgraph.yaml``/``depgraph.yml``/``depgraph.json``."""

    def can_handle(self, project_dir: Path) -> bool:
        return find_manifest(project_dir) is not None

    def load(self, project_dir: Path) -> ProjectRef:
        path = find_manifest(project_dir)
        if path is None:
            raise SourceError(f"No depgraph manifest in {project_dir}")
        return load_manifest(path)
