"""Tests for target image loading."""

import os

import cv2
import numpy as np
import pytest


class TestLoadTarget:
    """Tests for load_target."""

    def test_loads_rgb_readonly(self, temp_dir, gradient_image):
        from linez.io.load_image import load_target

        path = os.path.join(temp_dir, "target.png")
        cv2.imwrite(path, cv2.cvtColor(gradient_image, cv2.COLOR_RGB2BGR))

        target = load_target(path)

        assert target.readonly
        assert (target.width, target.height) == (32, 24)
        assert np.array_equal(target.pixels, gradient_image)

    def test_channel_order(self, temp_dir):
        """A pure red pixel stays red after loading."""
        from linez.io.load_image import load_target

        bgr = np.zeros((2, 2, 3), dtype=np.uint8)
        bgr[:, :, 2] = 255
        path = os.path.join(temp_dir, "red.png")
        cv2.imwrite(path, bgr)

        assert load_target(path).get(0, 0) == (255, 0, 0)

    def test_max_edge_downscales(self, temp_dir, gradient_image):
        from linez.io.load_image import load_target

        path = os.path.join(temp_dir, "target.png")
        cv2.imwrite(path, gradient_image)

        target = load_target(path, max_edge=16)

        assert (target.width, target.height) == (16, 12)

    def test_max_edge_never_upscales(self, temp_dir, gradient_image):
        from linez.io.load_image import load_target

        path = os.path.join(temp_dir, "target.png")
        cv2.imwrite(path, gradient_image)

        assert load_target(path, max_edge=1000).width == 32

    def test_missing_file(self, temp_dir):
        from linez.io.load_image import load_target

        with pytest.raises(FileNotFoundError):
            load_target(os.path.join(temp_dir, "missing.png"))

    def test_unsupported_extension(self, temp_dir):
        from linez.io.load_image import load_target

        path = os.path.join(temp_dir, "notes.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("not an image")

        with pytest.raises(ValueError):
            load_target(path)

    def test_undecodable_file(self, temp_dir):
        from linez.io.load_image import load_target

        path = os.path.join(temp_dir, "broken.png")
        with open(path, "wb") as f:
            f.write(b"\x00\x01garbage")

        with pytest.raises(ValueError):
            load_target(path)


class TestValidateImagePath:
    """Tests for validate_image_path."""

    def test_valid(self, temp_dir, gradient_image):
        from linez.io.load_image import validate_image_path

        path = os.path.join(temp_dir, "ok.jpg")
        cv2.imwrite(path, gradient_image)

        assert validate_image_path(path) == []

    def test_reports_missing(self, temp_dir):
        from linez.io.load_image import validate_image_path

        errors = validate_image_path(os.path.join(temp_dir, "gone.png"))

        assert len(errors) == 1
        assert "not found" in errors[0]
