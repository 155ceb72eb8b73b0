"""Node keys and display labels for projects and module coordinates."""

from __future__ import annotations

import re

from depgraph.model import ProjectRef, ResolvedDependency

# Reverse-domain and platform namespace segments that say nothing about the library.
GENERIC_SEGMENTS = frozenset(
    {
        "com",
        "org",
        "io",
        "net",
        "de",
        "me",
        "co",
        "uk",
        "fr",
        "ch",
        "nl",
        "edu",
        "dev",
        "info",
        "android",
        "androidx",
    }
)

_SEPARATORS_RE = re.compile(r"[-_.]")


def project_key(project: ProjectRef) -> str:
    return project.name


def module_key(group: str, artifact: str) -> str:
    """Deduplication key of a module; the version is deliberately not part of it."""
    return f"{group}:{artifact}"


def _normalize(text: str) -> str:
    return _SEPARATORS_RE.sub("", text).lower()


class LabelShortener:
    """Derive a short, readable label from a ``group:artifact`` coordinate.

    Leading generic segments and the organization segment are removed
    from the group, as are versioned namespaces such as ``rxjava2``.
    Whatever remains prefixes the artifact id, unless the artifact id
    already starts with one of those segments::

        org.jetbrains.kotlin:kotlin-stdlib      -> kotlin-stdlib
        org.jetbrains:annotations               -> jetbrains-annotations
        android.arch.persistence.room:runtime   -> persistence-room-runtime
    """

    def __init__(self, generic_segments: frozenset[str] | set[str] = GENERIC_SEGMENTS):
        self.generic_segments = frozenset(generic_segments)

    def group_segments(self, group: str) -> list[str]:
        segments = [s for s in group.split(".") if s]
        while segments and segments[0].lower() in self.generic_segments:
            segments.pop(0)
        if len(segments) >= 2:
            segments.pop(0)
        return [s for s in segments if not s[-1].isdigit()]

    def shorten(self, group: str, artifact: str) -> str:
        segments = self.group_segments(group)
        normalized = _normalize(artifact)
        if any(normalized.startswith(_normalize(s)) for s in segments):
            return artifact
        return "-".join([*segments, artifact])

    def __call__(self, dependency: ResolvedDependency) -> str:
        return self.shorten(dependency.group or "", dependency.artifact or "")


shorten_coordinate = LabelShortener()
