"""Progressive renderer for batched sample accumulation.

This module wraps the core integrator with a small stateful API:
- Batch rendering (several samples per pixel per call)
- Progress callbacks, or a generator yielding progress, between batches
- Reset of the render target

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.minitracer.core.progressive import ProgressiveRenderer
    >>> from src.minitracer.scene.spheres import create_default_scene
    >>> from src.minitracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(256, 256)
    >>> renderer.render(32)  # Render 32 SPP
    >>> buffer = renderer.get_image_buffer()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from src.minitracer.core.integrator import (
    clear_render_target,
    get_image_buffer,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates samples over successive calls.

    The renderer keeps width/height and delegates to the integrator's
    module-level buffers (Taichi fields), so only one render target exists
    at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the progressive renderer.

        Raises:
            ValueError: If dimensions are out of the supported range.
        """
        self._width = width
        self._height = height
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear the accumulated samples, keeping the image dimensions."""
        clear_render_target()

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples in batches with an optional progress callback.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples to render before each callback.
            callback: Optional function called after each batch with
                (current_total_samples, target_total_samples).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} samples")
            >>> renderer.render(32, batch_size=4, callback=progress)
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples in batches, yielding progress after each batch.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if num_samples <= 0:
            return
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch)
            remaining -= batch
            yield (self.sample_count, target_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear image, shape (height, width, 3), top row first."""
        return get_image_numpy()

    def get_image_buffer(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear image as a flat (width * height, 3) buffer."""
        return get_image_buffer()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
