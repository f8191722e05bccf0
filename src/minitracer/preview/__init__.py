"""Preview module for output and viewing.

Components:
    export: Gamma mapping, PPM and PNG export
    display: External viewer launch and Matplotlib preview

Example:
    >>> from src.minitracer.preview import ppm_filename, save_ppm, launch_viewer
    >>> path = save_ppm(buffer, 256, 256, ppm_filename(256, 256, 32, 12.7))
    >>> launch_viewer(path)
"""

from src.minitracer.preview.display import (
    DEFAULT_VIEWER,
    launch_viewer,
    show_preview,
    viewer_command,
)
from src.minitracer.preview.export import (
    DISPLAY_GAMMA,
    image_to_uint8,
    ppm_filename,
    save_png,
    save_ppm,
    to_display,
)

__all__ = [
    # Display functions
    "show_preview",
    "launch_viewer",
    "viewer_command",
    "DEFAULT_VIEWER",
    # Export functions
    "to_display",
    "image_to_uint8",
    "ppm_filename",
    "save_ppm",
    "save_png",
    "DISPLAY_GAMMA",
]
