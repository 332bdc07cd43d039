"""Rasterization through the external Graphviz executable."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    dot_path: Path
    image_path: Path
    ok: bool
    detail: str = ""


def build_command(
    executable: str, dot_path: Path, image_path: Path, engine: str = "neato", image_format: str = "png"
) -> List[str]:
    # -n keeps the node positions taken from the source file.
    return [executable, f"-K{engine}", "-n", f"-T{image_format}", str(dot_path), "-o", str(image_path)]


def render_dot(
    dot_path: Path,
    image_path: Path,
    executable: str = "dot",
    engine: str = "neato",
    image_format: str = "png",
    timeout: float = 10.0,
) -> RenderResult:
    """Run Graphviz on one DOT file; failures are reported, never raised.

    `subprocess.run` kills the child when the timeout expires and reaps it
    before returning.
    """
    command = build_command(executable, dot_path, image_path, engine, image_format)
    try:
        proc = subprocess.run(command, capture_output=True, text=True, check=False, timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.error("Graphviz timed out after %.1fs on %s", timeout, dot_path)
        return RenderResult(dot_path, image_path, ok=False, detail=f"timeout after {timeout}s")
    except OSError as error:
        logger.error("Failed to execute Graphviz (%s): %s", executable, error)
        return RenderResult(dot_path, image_path, ok=False, detail=str(error))

    if proc.returncode != 0:
        detail = (proc.stderr or "").strip()
        if len(detail) > 240:
            detail = detail[:240] + "..."
        logger.error("Error occurred while executing dot convert for %s: %s", dot_path, detail or proc.returncode)
        return RenderResult(dot_path, image_path, ok=False, detail=detail or f"exit status {proc.returncode}")

    logger.info("Finished executing dot convert: %s", image_path)
    return RenderResult(dot_path, image_path, ok=True)
