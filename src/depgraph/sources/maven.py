"""Build a resolved project forest from pom.xml via jgo."""

from __future__ import annotations

import logging
from pathlib import Path

from depgraph.errors import SourceError
from depgraph.model import Configuration, ProjectRef, ResolvedDependency

logger = logging.getLogger(__name__)

# Configuration name -> Maven scopes visible on that classpath (None = default compile).
SCOPE_CONFIGURATIONS: dict[str, tuple[str | None, ...]] = {
    "compileClasspath": (None, "compile", "provided"),
    "runtimeClasspath": (None, "compile", "runtime"),
    "testCompileClasspath": (None, "compile", "provided", "test"),
}

# Scopes that carry over to transitive dependencies.
_TRANSITIVE_SCOPES = (None, "compile", "runtime")


def discover_maven_modules(project_dir: Path) -> list[str]:
    """Parse <modules> from root pom.xml."""
    pom_path = project_dir / "pom.xml"
    if not pom_path.exists():
        return []
    try:
        from jgo.maven import POM

        pom = POM(pom_path)
        return pom.values("modules/module")
    except ImportError:
        logger.debug("jgo not installed — cannot discover Maven modules")
        return []
    except (OSError, ValueError, KeyError) as e:
        logger.debug("Could not parse pom.xml for modules: %s", e)
        return []


def _get_group_artifact(pom_path: Path) -> tuple[str, str] | None:
    """Extract (groupId, artifactId) from a pom.xml using jgo.

    Uses jgo's POM class which handles parent inheritance for groupId.
    """
    from jgo.maven import POM

    try:
        pom = POM(pom_path)
        if pom.groupId and pom.artifactId:
            return pom.groupId, pom.artifactId
    except (OSError, ValueError, KeyError, AttributeError) as e:
        logger.debug("Could not extract coords from %s: %s", pom_path, e)
    return None


def _convert(node, internal: dict[str, str]) -> ResolvedDependency:
    """Turn a jgo DependencyNode into a ResolvedDependency subtree."""
    dep = node.dep
    key = f"{dep.groupId}:{dep.artifactId}"
    if key in internal:
        resolved = ResolvedDependency(project=internal[key])
    else:
        resolved = ResolvedDependency(
            group=dep.groupId,
            artifact=dep.artifactId,
            version=getattr(dep, "version", None),
        )
    resolved.children = [
        _convert(child, internal)
        for child in node.children
        if child.dep.scope in _TRANSITIVE_SCOPES
    ]
    return resolved


def _load_module(
    pom_path: Path, name: str, path: str, internal: dict[str, str]
) -> ProjectRef:
    """Resolve one module's dependency tree and split it into configurations."""
    from jgo.maven import POM, MavenContext, Model

    project = ProjectRef(name=name, path=path)
    try:
        model = Model(POM(pom_path), MavenContext())
        _, tree = model.dependencies()
    except (OSError, ValueError, KeyError) as e:
        raise SourceError(f"Could not resolve dependencies of {pom_path}: {e}") from e

    for config_name, scopes in SCOPE_CONFIGURATIONS.items():
        project.configurations.append(
            Configuration(
                name=config_name,
                dependencies=[
                    _convert(child, internal)
                    for child in tree.children
                    if child.dep.scope in scopes
                ],
            )
        )

    logger.debug(
        "Maven module %s: %d direct dependencies",
        name,
        len(tree.children),
    )
    return project


class MavenSource:
    """Load the forest of a single- or multi-module Maven build."""

    def can_handle(self, project_dir: Path) -> bool:
        return (project_dir / "pom.xml").exists()

    def load(self, project_dir: Path) -> ProjectRef:
        try:
            import jgo.maven  # noqa: F401
        except ImportError as e:
            raise SourceError(
                "jgo not installed — cannot resolve Maven dependencies. "
                "Install with: pip install depgraph[java]"
            ) from e

        root_pom = project_dir / "pom.xml"
        root_coord = _get_group_artifact(root_pom)
        root_name = root_coord[1] if root_coord else project_dir.name

        modules = discover_maven_modules(project_dir)
        if not modules:
            return _load_module(root_pom, root_name, ":", {})

        # Sibling modules become project dependencies instead of external modules.
        internal: dict[str, str] = {}
        module_poms: list[tuple[Path, str]] = []
        for module in modules:
            pom_path = project_dir / module / "pom.xml"
            if not pom_path.exists():
                logger.warning("Module %s has no pom.xml, skipping", module)
                continue
            coord = _get_group_artifact(pom_path)
            name = coord[1] if coord else Path(module).name
            if coord:
                internal[":".join(coord)] = name
            module_poms.append((pom_path, name))

        logger.debug(
            "Multi-module: %d modules, %d internal coords",
            len(module_poms),
            len(internal),
        )

        root = ProjectRef(name=root_name, path=":")
        root.subprojects = [
            _load_module(pom_path, name, f":{name}", internal)
            for pom_path, name in module_poms
        ]
        return root
