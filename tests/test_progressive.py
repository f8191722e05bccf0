"""Tests for the progressive renderer.

This module tests the ProgressiveRenderer class including:
- Initialization and reset
- Batched rendering with callbacks
- Generator-based progress
- Image output

Note: Imports are done inside test methods to avoid Taichi initialization issues.
"""

import numpy as np
import pytest


@pytest.fixture
def sky_renderer():
    """A small renderer looking at an empty scene with the default camera."""
    from src.minitracer.camera.pinhole import PinholeCamera, setup_camera
    from src.minitracer.core.progressive import ProgressiveRenderer

    setup_camera(PinholeCamera())
    return ProgressiveRenderer(8, 8)


@pytest.fixture
def spheres_renderer():
    """A small renderer looking at the default two-sphere scene."""
    from src.minitracer.camera.pinhole import setup_camera
    from src.minitracer.core.progressive import ProgressiveRenderer
    from src.minitracer.scene.spheres import create_default_scene

    _, camera = create_default_scene()
    setup_camera(camera)
    return ProgressiveRenderer(8, 8)


class TestProgressiveRendererInit:
    """Test ProgressiveRenderer initialization."""

    def test_init_creates_render_target(self):
        """Test that init sets up the render target."""
        from src.minitracer.core.integrator import get_image_dimensions
        from src.minitracer.core.progressive import ProgressiveRenderer

        renderer = ProgressiveRenderer(32, 24)

        assert renderer.width == 32
        assert renderer.height == 24
        assert renderer.sample_count == 0
        assert get_image_dimensions() == (32, 24)

    def test_init_rejects_oversized_dimensions(self):
        """Test that init raises for dimensions beyond the maximum."""
        from src.minitracer.core.integrator import MAX_IMAGE_WIDTH
        from src.minitracer.core.progressive import ProgressiveRenderer

        with pytest.raises(ValueError):
            ProgressiveRenderer(MAX_IMAGE_WIDTH + 1, 16)


class TestProgressiveRendererReset:
    """Test reset."""

    def test_reset_clears_sample_count(self, sky_renderer):
        """Test that reset() clears the sample count."""
        sky_renderer.render(num_samples=3)
        assert sky_renderer.sample_count == 3

        sky_renderer.reset()
        assert sky_renderer.sample_count == 0
        assert sky_renderer.width == 8

    def test_reset_clears_color_buffer(self, sky_renderer):
        """Test that reset() zeroes the image."""
        sky_renderer.render(num_samples=2)
        assert sky_renderer.get_image_numpy().max() > 0.0

        sky_renderer.reset()
        assert np.all(sky_renderer.get_image_numpy() == 0.0)


class TestProgressiveRendererRender:
    """Test batched rendering."""

    def test_render_accumulates_samples(self, sky_renderer):
        """Test that render() adds the requested samples."""
        sky_renderer.render(num_samples=5)
        assert sky_renderer.sample_count == 5

    @pytest.mark.parametrize("num_samples", [0, -2])
    def test_render_with_non_positive_samples_does_nothing(self, sky_renderer, num_samples):
        """Test that zero or negative sample counts are ignored."""
        sky_renderer.render(num_samples=num_samples)
        assert sky_renderer.sample_count == 0

    def test_render_with_batch_size(self, sky_renderer):
        """Test that batch size does not change the total."""
        sky_renderer.render(num_samples=7, batch_size=3)
        assert sky_renderer.sample_count == 7

    def test_render_rejects_non_positive_batch_size(self, sky_renderer):
        """Test that batch_size must be positive."""
        with pytest.raises(ValueError, match="batch_size"):
            sky_renderer.render(num_samples=4, batch_size=0)

    def test_multiple_render_calls_accumulate(self, sky_renderer):
        """Test that repeated calls keep adding samples."""
        sky_renderer.render(num_samples=2)
        sky_renderer.render(num_samples=3, batch_size=2)
        assert sky_renderer.sample_count == 5


class TestProgressiveRendererCallbacks:
    """Test progress callbacks."""

    def test_callback_receives_progress(self, sky_renderer):
        """Test that the callback sees each batch."""
        progress = []
        sky_renderer.render(
            num_samples=10,
            batch_size=4,
            callback=lambda current, target: progress.append((current, target)),
        )

        assert progress == [(4, 10), (8, 10), (10, 10)]

    def test_callback_with_existing_samples(self, sky_renderer):
        """Test that the target includes samples rendered earlier."""
        sky_renderer.render(num_samples=3)

        progress = []
        sky_renderer.render(
            num_samples=4,
            batch_size=2,
            callback=lambda current, target: progress.append((current, target)),
        )

        assert progress == [(5, 7), (7, 7)]


class TestProgressiveRendererGenerator:
    """Test generator-based progress."""

    def test_render_progressive_yields_progress(self, sky_renderer):
        """Test that the generator yields after each batch."""
        steps = list(sky_renderer.render_progressive(num_samples=6, batch_size=2))
        assert steps == [(2, 6), (4, 6), (6, 6)]

    def test_render_progressive_with_zero_samples(self, sky_renderer):
        """Test that nothing is yielded for zero samples."""
        assert list(sky_renderer.render_progressive(num_samples=0)) == []

    def test_render_progressive_interruptible(self, sky_renderer):
        """Test that stopping early keeps the samples rendered so far."""
        for current, _ in sky_renderer.render_progressive(num_samples=10, batch_size=2):
            if current >= 4:
                break

        assert sky_renderer.sample_count == 4


class TestProgressiveRendererImageOutput:
    """Test image output."""

    def test_get_image_numpy_returns_correct_shape(self, spheres_renderer):
        """Test the image shape is (height, width, 3)."""
        spheres_renderer.render(num_samples=2)
        image = spheres_renderer.get_image_numpy()

        assert image.shape == (8, 8, 3)
        assert image.dtype == np.float32

    def test_get_image_buffer_is_flat(self, spheres_renderer):
        """Test the buffer shape is (width * height, 3)."""
        spheres_renderer.render(num_samples=2)
        buffer = spheres_renderer.get_image_buffer()

        assert buffer.shape == (64, 3)
        assert np.array_equal(buffer.reshape(8, 8, 3), spheres_renderer.get_image_numpy())

    def test_values_in_expected_range(self, spheres_renderer):
        """Test diffuse scenes under the sky stay within [0, 1]."""
        spheres_renderer.render(num_samples=4)
        image = spheres_renderer.get_image_numpy()

        assert not np.isnan(image).any()
        assert not np.isinf(image).any()
        assert image.min() >= 0.0
        assert image.max() <= 1.0 + 1e-6


class TestProgressiveRendererRepr:
    """Test string representation."""

    def test_repr_shows_state(self, sky_renderer):
        """Test that repr reports size and samples."""
        sky_renderer.render(num_samples=2)
        assert repr(sky_renderer) == "ProgressiveRenderer(width=8, height=8, samples=2)"
