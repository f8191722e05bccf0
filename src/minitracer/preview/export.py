"""Image export utilities for rendered images.

Linear colors are mapped to 8-bit display values with a gamma-2.2 transform:
``int(clamp(x, 0, 1) ** (1 / 2.2) * 255 + 0.5)``.

Supported formats:
    - Plain-text PPM (P3), the renderer's primary output
    - PNG (8-bit via Pillow)

Example:
    >>> from src.minitracer.preview.export import ppm_filename, save_ppm
    >>> buffer = renderer.get_image_buffer()
    >>> save_ppm(buffer, 256, 256, ppm_filename(256, 256, 32, elapsed))
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Display gamma applied on write-out
DISPLAY_GAMMA = 2.2

# Maximum 8-bit channel value
MAX_CHANNEL_VALUE = 255


def to_display(value: float, gamma: float = DISPLAY_GAMMA) -> int:
    """Map one linear channel value to an 8-bit display value.

    Args:
        value: Linear channel value; clamped to [0, 1].
        gamma: Display gamma (default 2.2).

    Returns:
        Integer in [0, 255].

    Example:
        >>> to_display(1.0)
        255
        >>> to_display(0.0)
        0
    """
    clamped = min(max(value, 0.0), 1.0)
    return int(clamped ** (1.0 / gamma) * MAX_CHANNEL_VALUE + 0.5)


def image_to_uint8(
    image: npt.NDArray[np.floating],
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.uint8]:
    """Vectorized to_display over an array of linear colors.

    Args:
        image: Linear image of any shape, typically (H, W, 3) or (N, 3).
        gamma: Display gamma (default 2.2).

    Returns:
        Array of the same shape with dtype uint8.
    """
    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    mapped = np.floor(np.power(clamped, 1.0 / gamma) * MAX_CHANNEL_VALUE + 0.5)
    return mapped.astype(np.uint8)


def ppm_filename(width: int, height: int, samples: int, elapsed_seconds: float) -> str:
    """Build the output file name ``image-<w>-<h>-<samples>-<seconds>.ppm``.

    Elapsed time is truncated to whole seconds.
    """
    return f"image-{width}-{height}-{samples}-{int(elapsed_seconds)}.ppm"


def save_ppm(
    buffer: npt.NDArray[np.floating],
    width: int,
    height: int,
    filepath: str | Path,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> Path:
    """Save a flat image buffer as a plain-text PPM (P3) file.

    The file starts with ``P3\\n<width> <height>\\n255\\n`` and is followed by
    ``width * height`` space-separated RGB triples in buffer order. Each
    image row goes on its own line, so the layout differs from a file with
    every triple on one line while holding the same values.

    Args:
        buffer: Linear colors, shape (width * height, 3), top-left pixel first.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path.
        gamma: Display gamma (default 2.2).

    Returns:
        The path that was written.

    Raises:
        ValueError: If the buffer does not hold width * height RGB values.
    """
    pixels = np.asarray(buffer)
    if pixels.shape != (width * height, 3):
        raise ValueError(
            f"Buffer shape {pixels.shape} does not match a {width}x{height} RGB image"
        )

    values = image_to_uint8(pixels, gamma=gamma).reshape(height, width * 3)

    path = Path(filepath)
    with path.open("w", encoding="ascii") as f:
        f.write(f"P3\n{width} {height}\n{MAX_CHANNEL_VALUE}\n")
        for row in values:
            f.write(" ".join(str(v) for v in row))
            f.write("\n")

    return path


def save_png(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> Path:
    """Save a linear image array as an 8-bit PNG file.

    Args:
        image: Linear image array of shape (H, W, 3), top row first.
        filepath: Output file path (should end in .png).
        gamma: Display gamma (default 2.2).

    Returns:
        The path that was written.
    """
    image_uint8 = image_to_uint8(image, gamma=gamma)

    path = Path(filepath)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(path)
    return path
