"""Write DOT text to disk and rasterize it with Graphviz."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from depgraph.errors import RenderError

logger = logging.getLogger(__name__)


def output_stem(generator_name: str) -> str:
    """File name stem: ``dependency-graph`` or ``dependency-graph-<name>``."""
    if generator_name:
        return f"dependency-graph-{generator_name}"
    return "dependency-graph"


def write_dot(text: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")


def render_image(dot_path: Path, fmt: str) -> Path | None:
    """Run ``dot -T<fmt>`` on *dot_path*; return the image path.

    Returns None when Graphviz is not installed.
    """
    dot = shutil.which("dot")
    if dot is None:
        logger.warning("Graphviz 'dot' not found on PATH, skipping %s image", fmt)
        return None

    image_path = dot_path.with_suffix(f".{fmt}")
    try:
        result = subprocess.run(
            [dot, f"-T{fmt}", "-o", str(image_path), str(dot_path)],
            capture_output=True,
            text=True,
            timeout=300,
        )
    except subprocess.TimeoutExpired as e:
        raise RenderError(f"dot timed out rendering {dot_path}") from e

    if result.returncode != 0:
        raise RenderError(
            "dot failed: "
            + (result.stderr.strip() if result.stderr else "unknown error")
        )
    return image_path
