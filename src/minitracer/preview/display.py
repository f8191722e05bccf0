"""Viewing rendered images.

Two ways to look at a finished render:
    - launch_viewer: hand a written image file to an external program
      (ffplay by default)
    - show_preview: display the image in a Matplotlib window

Example:
    >>> from src.minitracer.preview.display import launch_viewer, show_preview
    >>> launch_viewer("image-256-256-32-12.ppm")
    >>> show_preview(renderer.get_image_numpy(), title="32 SPP")
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.minitracer.preview.export import DISPLAY_GAMMA, image_to_uint8

# External viewer used when none is given
DEFAULT_VIEWER = "ffplay"


def viewer_command(filepath: str | Path, command: str = DEFAULT_VIEWER) -> list[str]:
    """Build the argument list that opens filepath with command.

    The command may carry its own arguments, e.g. ``"ffplay -autoexit"``.

    Raises:
        ValueError: If command is empty.
    """
    args = shlex.split(command)
    if not args:
        raise ValueError("Viewer command must not be empty")
    return [*args, str(filepath)]


def launch_viewer(filepath: str | Path, command: str = DEFAULT_VIEWER) -> int:
    """Open an image file with an external viewer and wait for it to exit.

    Args:
        filepath: The image file to show.
        command: Viewer program, optionally with arguments.

    Returns:
        The viewer's exit code.

    Raises:
        FileNotFoundError: If the viewer program cannot be found.
        ValueError: If command is empty.
    """
    completed = subprocess.run(viewer_command(filepath, command), check=False)
    return completed.returncode


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = DISPLAY_GAMMA,
    title: str | None = None,
    figsize: tuple[float, float] = (6, 6),
    block: bool = True,
) -> None:
    """Display a linear image as a Matplotlib figure.

    The image goes through the same gamma mapping as file export.

    Args:
        image: Linear image array of shape (H, W, 3), top row first.
        gamma: Display gamma (default 2.2).
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = image_to_uint8(image, gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
