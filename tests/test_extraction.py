"""Tests for brightness-percentile coordinate extraction."""

import numpy as np
import pytest

from rasterdrone.models import ImagePolarity


def _opaque(height, width):
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img


class TestImageToCoordinates:
    """Tests for image_to_coordinates."""

    def test_single_white_pixel(self, single_white_pixel_image):
        """A lone white pixel is the only coordinate at percentile 1.0."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        coords = image_to_coordinates(single_white_pixel_image, 1.0, ImagePolarity.WHITE_ON_BLACK)

        assert coords == [(1, 1)]

    def test_round_trip_through_raster(self, single_white_pixel_image):
        """Painting extracted coordinates back reproduces the source image."""
        from rasterdrone.preprocess.extraction import image_to_coordinates, to_grayscale
        from rasterdrone.render.raster import coordinates_to_image

        coords = image_to_coordinates(single_white_pixel_image, 1.0, ImagePolarity.WHITE_ON_BLACK)
        rendered = coordinates_to_image(4, 4, coords)

        assert np.array_equal(rendered, to_grayscale(single_white_pixel_image))

    def test_percentile_zero_is_empty(self, scattered_dots_image):
        """Percentile 0 selects nothing."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        assert image_to_coordinates(scattered_dots_image, 0.0, ImagePolarity.WHITE_ON_BLACK) == []

    def test_percentile_one_selects_all_nonzero(self, scattered_dots_image):
        """Percentile 1 selects every pixel with brightness above zero."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        coords = image_to_coordinates(scattered_dots_image, 1.0, ImagePolarity.WHITE_ON_BLACK)

        assert len(coords) == 6
        assert set(coords) == {(2, 3), (28, 4), (15, 15), (5, 27), (29, 29), (16, 2)}

    def test_ranked_brightest_first(self, scattered_dots_image):
        """Coordinates come back in descending brightness order."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        coords = image_to_coordinates(scattered_dots_image, 1.0, ImagePolarity.WHITE_ON_BLACK)

        assert coords == [(2, 3), (28, 4), (15, 15), (5, 27), (29, 29), (16, 2)]

    def test_ties_keep_scan_order(self):
        """Equal brightness keeps row-major order."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        img = _opaque(3, 4)
        img[2, 0, :3] = 200
        img[0, 3, :3] = 200
        img[1, 1, :3] = 200
        img[1, 0, :3] = 250

        coords = image_to_coordinates(img, 1.0, ImagePolarity.WHITE_ON_BLACK)

        assert coords == [(0, 1), (3, 0), (1, 1), (0, 2)]

    def test_percentile_rounds_count(self, scattered_dots_image):
        """The kept count is round(count * percentile)."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        assert len(image_to_coordinates(scattered_dots_image, 0.5, ImagePolarity.WHITE_ON_BLACK)) == 3
        assert len(image_to_coordinates(scattered_dots_image, 0.25, ImagePolarity.WHITE_ON_BLACK)) == 2
        assert len(image_to_coordinates(scattered_dots_image, 0.05, ImagePolarity.WHITE_ON_BLACK)) == 0

    def test_percentile_clamped(self, scattered_dots_image):
        """Out-of-range percentiles are clamped instead of rejected."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        assert image_to_coordinates(scattered_dots_image, 1.7, ImagePolarity.WHITE_ON_BLACK) == image_to_coordinates(scattered_dots_image, 1.0, ImagePolarity.WHITE_ON_BLACK)
        assert image_to_coordinates(scattered_dots_image, -0.3, ImagePolarity.WHITE_ON_BLACK) == []

    def test_transparent_pixels_ignored(self):
        """Alpha scales brightness, so fully transparent pixels never qualify."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        img = _opaque(2, 2)
        img[0, 0] = (255, 255, 255, 0)
        img[1, 1] = (255, 255, 255, 255)

        assert image_to_coordinates(img, 1.0, ImagePolarity.WHITE_ON_BLACK) == [(1, 1)]

    def test_half_transparent_ranks_lower(self):
        """A white pixel at half alpha ranks below an opaque gray one."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        img = _opaque(1, 2)
        img[0, 0] = (255, 255, 255, 100)
        img[0, 1] = (180, 180, 180, 255)

        assert image_to_coordinates(img, 1.0, ImagePolarity.WHITE_ON_BLACK) == [(1, 0), (0, 0)]

    def test_black_on_white_selects_dark_pixels(self):
        """With black-on-white polarity the dark subject is extracted."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        img = np.full((5, 5, 4), 255, dtype=np.uint8)
        img[3, 2, :3] = 0
        img[1, 4, :3] = 100

        coords = image_to_coordinates(img, 1.0, ImagePolarity.BLACK_ON_WHITE)

        assert coords == [(2, 3), (4, 1)]

    def test_empty_image(self):
        """An all-black image yields no coordinates."""
        from rasterdrone.preprocess.extraction import image_to_coordinates

        assert image_to_coordinates(_opaque(8, 8), 1.0, ImagePolarity.WHITE_ON_BLACK) == []

    def test_polarity_is_required(self, scattered_dots_image):
        """Callers must say which side of the brightness scale is the subject."""
        from rasterdrone.preprocess.extraction import image_to_coordinates, pixel_brightness

        with pytest.raises(TypeError):
            image_to_coordinates(scattered_dots_image, 1.0)
        with pytest.raises(TypeError):
            pixel_brightness(scattered_dots_image)


class TestImageHelpers:
    """Tests for RGBA conversion and resizing."""

    def test_to_rgba_from_gray(self):
        """Grayscale input becomes opaque RGBA."""
        from rasterdrone.preprocess.extraction import to_rgba

        rgba = to_rgba(np.full((3, 5), 77, dtype=np.uint8))

        assert rgba.shape == (3, 5, 4)
        assert np.all(rgba[..., 0] == 77)
        assert np.all(rgba[..., 3] == 255)

    def test_to_rgba_rejects_bad_shape(self):
        from rasterdrone.preprocess.extraction import to_rgba

        with pytest.raises(ValueError):
            to_rgba(np.zeros((3, 3, 2), dtype=np.uint8))

    def test_resize_preserves_aspect(self):
        """Resizing fits the bounds and keeps the aspect ratio."""
        from rasterdrone.preprocess.extraction import resize_to_fit

        resized = resize_to_fit(_opaque(200, 400), (100, 100))

        assert resized.shape[:2] == (50, 100)

    def test_resize_never_upscales(self):
        """Images already within bounds are untouched."""
        from rasterdrone.preprocess.extraction import resize_to_fit

        img = _opaque(20, 30)
        assert resize_to_fit(img, (256, 256)) is img
