"""
Target image loading for linez.

Decodes an image file with OpenCV and hands the optimizer a read-only
RasterBuffer in RGB order.
"""

import os

import cv2

from linez.raster import RasterBuffer
from linez.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tiff", ".tif", ".bmp", ".webp")


@trace(label="load_target")
def load_target(path, max_edge=None):
    """
    Load the target image from disk.

    Optionally downscales so that the longest edge is at most max_edge,
    preserving aspect ratio.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the file is not a supported, decodable image.
    """
    tracer = get_tracer()

    errors = validate_image_path(path)
    if errors:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Image not found: {path}")
        raise ValueError("; ".join(errors))

    img_bgr = cv2.imread(path, cv2.IMREAD_COLOR)
    if img_bgr is None:
        raise ValueError(f"Failed to decode image: {path}")

    img_rgb = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)
    img_rgb = downscale(img_rgb, max_edge)

    height, width = img_rgb.shape[:2]
    tracer.event(f"Loaded target: {width}x{height}", source=os.path.abspath(path))

    return RasterBuffer.from_array(img_rgb, readonly=True)


def downscale(img, max_edge=None):
    """Shrink img so its longest edge is at most max_edge. Never upscales."""
    if not max_edge or max(img.shape[:2]) <= max_edge:
        return img

    scale = max_edge / max(img.shape[:2])
    new_size = (max(1, int(img.shape[1] * scale)), max(1, int(img.shape[0] * scale)))
    return cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)


def validate_image_path(path):
    """
    Check that path exists and looks like a supported image.

    Returns a list of error messages (empty if valid).
    """
    errors = []

    if not os.path.exists(path):
        errors.append(f"File not found: {path}")
        return errors

    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        errors.append(f"Unsupported image format: {path}")

    return errors
