"""Build a resolved project forest from ``gradle dependencies`` reports."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

from depgraph.errors import SourceError
from depgraph.model import Configuration, ProjectRef, ResolvedDependency

logger = logging.getLogger(__name__)

# Configuration header: "compileClasspath - Compile classpath for source set 'main'."
_CONFIG_RE = re.compile(r"^([A-Za-z][\w-]*)(?: - (.*))?$")

# Tree line: "|    \--- org.jetbrains:annotations:13.0"
_TREE_RE = re.compile(r"^([| ]*)[+\\]--- (.+)$")

# Trailing markers Gradle appends to tree entries.
_MARKER_RE = re.compile(r"\s+\((\*|c|n)\)$")

# include ':app', ':lib'  /  include(":app", ":lib")
_INCLUDE_RE = re.compile(r"\binclude\b\s*(?:\(([^)]*)\)|([^\n]*(?:,\s*\n[^\n]*)*))")
_QUOTED_RE = re.compile(r"""["']([^"']+)["']""")
_LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)


def _is_gradle_project(project_dir: Path) -> bool:
    return (project_dir / "build.gradle.kts").exists() or (
        project_dir / "build.gradle"
    ).exists()


def discover_gradle_subprojects(project_dir: Path) -> list[str]:
    """Project paths included by settings.gradle(.kts), without the leading colon."""
    for name in ("settings.gradle.kts", "settings.gradle"):
        settings_path = project_dir / name
        if not settings_path.exists():
            continue
        try:
            text = settings_path.read_text()
        except OSError as e:
            logger.warning("Could not read %s: %s", settings_path, e)
            return []
        text = _LINE_COMMENT_RE.sub("", text)
        paths = []
        for include in _INCLUDE_RE.finditer(text):
            arguments = include.group(1) or include.group(2) or ""
            paths.extend(p.lstrip(":") for p in _QUOTED_RE.findall(arguments))
        return [p for p in paths if p]
    return []


def _parse_entry(text: str, where: str) -> ResolvedDependency | None:
    """Parse one tree entry. Returns None for entries that are not resolved."""
    marker = _MARKER_RE.search(text)
    if marker:
        if marker.group(1) in ("c", "n"):
            return None
        text = text[: marker.start()]

    if text.endswith(" FAILED"):
        raise SourceError(f"{where}: unresolved dependency {text[:-7]}")

    if text.startswith("project "):
        path = text[len("project ") :].split(" -> ")[0].strip()
        return ResolvedDependency(project=path.rsplit(":", 1)[-1])

    requested, _, selected = text.partition(" -> ")
    selected = selected.strip()
    if selected.startswith("project "):
        return _parse_entry(selected, where)
    # "g:a:1 -> 2" picks a version, "g:a:1 -> g2:a2:2" substitutes the module
    substituted = ":" in selected
    parts = (selected if substituted else requested).split(":")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise SourceError(f"{where}: cannot parse dependency {text!r}")
    version = parts[2] if len(parts) > 2 else None
    if selected and not substituted:
        version = selected
    return ResolvedDependency(group=parts[0], artifact=parts[1], version=version)


def parse_dependency_report(text: str, name: str, path: str = ":") -> ProjectRef:
    """Parse the ASCII tree printed by ``gradle dependencies`` into a project.

    Configurations whose description ends in ``(n)`` are declarable only
    and are marked as not resolvable.
    """
    project = ProjectRef(name=name, path=path)
    config: Configuration | None = None
    # stack[i] holds the most recent dependency at depth i
    stack: list[ResolvedDependency | None] = []

    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.rstrip()
        if not line:
            config = None
            continue

        tree = _TREE_RE.match(line)
        if tree and config is not None:
            depth = len(tree.group(1)) // 5
            dependency = _parse_entry(tree.group(2), f"{name}/{config.name}:{lineno}")
            del stack[depth:]
            if depth == 0:
                if dependency is not None:
                    config.dependencies.append(dependency)
            elif dependency is not None:
                parent = stack[depth - 1] if len(stack) >= depth else None
                if parent is not None:
                    parent.children.append(dependency)
                else:
                    dependency = None
            stack.append(dependency)
            continue

        header = _CONFIG_RE.match(line)
        if header and config is None:
            description = header.group(2) or ""
            config = project.configuration(header.group(1))
            config.resolvable = not description.endswith("(n)")
            stack = []

    logger.debug(
        "Gradle report for %s: %d configurations", name, len(project.configurations)
    )
    return project


def _gradle_command(project_dir: Path) -> str:
    for wrapper in ("gradlew", "gradlew.bat"):
        candidate = project_dir / wrapper
        if candidate.exists():
            return str(candidate)
    gradle = shutil.which("gradle")
    if gradle is None:
        raise SourceError("Neither a Gradle wrapper nor gradle on PATH was found")
    return gradle


def _run_dependencies_task(project_dir: Path, task: str) -> str:
    """Run a ``dependencies`` task and return its report."""
    command = [_gradle_command(project_dir), "-q", task]
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            cwd=str(project_dir),
            timeout=600,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise SourceError(f"Could not run {task}: {e}") from e

    if result.returncode != 0:
        raise SourceError(
            f"{task} failed: "
            + (result.stderr.strip() if result.stderr else "unknown error")
        )
    return result.stdout


class GradleSource:
    """Load the forest of a single- or multi-project Gradle build."""

    def can_handle(self, project_dir: Path) -> bool:
        return _is_gradle_project(project_dir) or any(
            (project_dir / name).exists()
            for name in ("settings.gradle.kts", "settings.gradle")
        )

    def load(self, project_dir: Path) -> ProjectRef:
        subprojects = discover_gradle_subprojects(project_dir)
        root_name = project_dir.name

        if not subprojects:
            report = _run_dependencies_task(project_dir, "dependencies")
            return parse_dependency_report(report, root_name)

        root = ProjectRef(name=root_name, path=":")
        seen: dict[str, str] = {}
        for sub in subprojects:
            path = ":" + sub.replace("/", ":")
            name = path.rsplit(":", 1)[-1]
            if name in seen:
                raise SourceError(
                    f"Projects {seen[name]} and {path} share the name {name!r}"
                )
            seen[name] = path
            report = _run_dependencies_task(project_dir, f"{path}:dependencies")
            root.subprojects.append(parse_dependency_report(report, name, path))
        logger.debug("Gradle subprojects: %s", [p.name for p in root.subprojects])
        return root
