"""Tests for face-anchored cropping."""

import numpy as np
import pytest

from portrait_diff import (
    BoundingBox,
    CropRectangle,
    InvalidConfiguration,
    InvalidCropRectangle,
    InvalidImage,
    RasterImage,
    apply_crop,
    compute_crop_rectangle,
    select_largest_face,
)


class TestComputeCropRectangle:
    """Test cases for compute_crop_rectangle."""

    def test_no_face_returns_full_image(self):
        rect = compute_crop_rectangle(640, 480, 800, 1200, face_box=None)

        assert rect == CropRectangle(left=0, top=0, width=640, height=480)

    def test_portrait_scenario(self, centered_face):
        """600x800 source, 800x1200 target, 50px margin."""
        rect = compute_crop_rectangle(600, 800, 800, 1200, centered_face, head_top_margin=50)

        assert rect.width == 533
        assert rect.height == 800
        assert rect.top == 0
        assert abs(rect.left - 34) <= 1

    def test_width_bound_source(self):
        """Narrow source: crop derived from width instead of height."""
        face = BoundingBox(x=150, y=500, width=100, height=120)
        rect = compute_crop_rectangle(400, 2000, 800, 1200, face, head_top_margin=50)

        assert rect.width == 400
        assert rect.height == 600
        assert rect.left == 0
        assert rect.top == 450

    def test_horizontal_centering_on_face(self):
        face = BoundingBox(x=750, y=200, width=100, height=100)
        rect = compute_crop_rectangle(1600, 600, 800, 1200, face, head_top_margin=50)

        assert rect.width == 400
        assert rect.height == 600
        assert rect.left + rect.width / 2 == pytest.approx(800, abs=1)
        assert rect.top == 0

    def test_clamped_at_left_edge(self):
        face = BoundingBox(x=0, y=100, width=60, height=60)
        rect = compute_crop_rectangle(2000, 1000, 100, 100, face, head_top_margin=10)

        assert rect.left == 0
        assert rect.width == 1000

    def test_clamped_at_right_edge(self):
        face = BoundingBox(x=1940, y=100, width=60, height=60)
        rect = compute_crop_rectangle(2000, 1000, 100, 100, face, head_top_margin=10)

        assert rect.right == 2000

    def test_head_margin_anchors_top(self):
        """Landscape target in a tall photo leaves room to move vertically."""
        face = BoundingBox(x=200, y=700, width=100, height=100)
        rect = compute_crop_rectangle(500, 1500, 1000, 500, face, head_top_margin=40)

        assert rect.height == 250
        assert rect.top == 660

    def test_margin_larger_than_face_top(self):
        face = BoundingBox(x=200, y=20, width=100, height=100)
        rect = compute_crop_rectangle(500, 1500, 1000, 500, face, head_top_margin=50)

        assert rect.top == 0

    def test_top_clamped_to_bottom(self):
        face = BoundingBox(x=200, y=1450, width=40, height=40)
        rect = compute_crop_rectangle(500, 1500, 1000, 500, face, head_top_margin=0)

        assert rect.bottom == 1500

    @pytest.mark.parametrize("source", [(600, 800), (1920, 1080), (333, 777), (1001, 999)])
    @pytest.mark.parametrize("target", [(800, 1200), (1, 1), (1280, 720), (35, 45)])
    @pytest.mark.parametrize("face_x", [0, 0.37, 0.5, 0.99])
    def test_within_bounds_and_aspect(self, source, target, face_x):
        sw, sh = source
        tw, th = target
        face = BoundingBox(x=int(sw * face_x), y=sh // 3, width=20, height=20)

        rect = compute_crop_rectangle(sw, sh, tw, th, face, head_top_margin=50)

        assert rect.fits_within(sw, sh)
        assert abs(rect.width - rect.height * tw / th) <= 1

    def test_invalid_target_raises(self, centered_face):
        with pytest.raises(InvalidConfiguration):
            compute_crop_rectangle(600, 800, 0, 1200, centered_face)
        with pytest.raises(InvalidConfiguration):
            compute_crop_rectangle(600, 800, 800, -1, None)

    def test_negative_margin_raises(self, centered_face):
        with pytest.raises(InvalidConfiguration):
            compute_crop_rectangle(600, 800, 800, 1200, centered_face, head_top_margin=-1)

    def test_zero_area_source_raises(self, centered_face):
        with pytest.raises(InvalidImage):
            compute_crop_rectangle(0, 800, 800, 1200, centered_face)


class TestApplyCrop:
    """Test cases for apply_crop."""

    def test_output_has_target_size(self, random_image):
        source = random_image(600, 800)
        rect = CropRectangle(left=34, top=0, width=533, height=800)

        out = apply_crop(source, rect, 80, 120)

        assert out.size == (80, 120)

    def test_uniform_region_keeps_color(self, make_image):
        source = make_image(300, 300, (10, 200, 30))
        rect = CropRectangle(left=50, top=50, width=100, height=150)

        out = apply_crop(source, rect, 40, 60)

        assert out.pixel(0, 0) == (10, 200, 30)
        assert out.pixel(39, 59) == (10, 200, 30)

    def test_extracts_the_rectangle(self):
        arr = np.zeros((100, 100, 3), dtype=np.uint8)
        arr[20:60, 30:50] = (255, 0, 0)
        source = RasterImage(arr)

        out = apply_crop(source, CropRectangle(left=30, top=20, width=20, height=40), 20, 40)

        assert (out.pixels == (255, 0, 0)).all()

    def test_cover_center_trims_mismatched_aspect(self):
        """A 200x100 region into 100x100 keeps the centered square."""
        arr = np.zeros((100, 200, 3), dtype=np.uint8)
        arr[:, :100] = (255, 0, 0)
        arr[:, 100:] = (0, 0, 255)
        source = RasterImage(arr)

        out = apply_crop(source, CropRectangle(0, 0, 200, 100), 100, 100)

        assert out.pixel(10, 50) == (255, 0, 0)
        assert out.pixel(90, 50) == (0, 0, 255)

    @pytest.mark.parametrize("rect", [
        CropRectangle(left=-1, top=0, width=10, height=10),
        CropRectangle(left=0, top=-5, width=10, height=10),
        CropRectangle(left=95, top=0, width=10, height=10),
        CropRectangle(left=0, top=0, width=10, height=101),
        CropRectangle(left=0, top=0, width=0, height=10),
    ])
    def test_out_of_bounds_rect_raises(self, make_image, rect):
        with pytest.raises(InvalidCropRectangle):
            apply_crop(make_image(100, 100), rect, 10, 10)

    def test_invalid_target_raises(self, make_image):
        with pytest.raises(InvalidConfiguration):
            apply_crop(make_image(100, 100), CropRectangle(0, 0, 100, 100), 0, 10)

    def test_source_not_mutated(self, random_image):
        source = random_image(120, 90, seed=11)
        before = source.pixels.copy()

        apply_crop(source, CropRectangle(10, 10, 60, 60), 30, 30)

        assert np.array_equal(source.pixels, before)

    def test_end_to_end_portrait(self, random_image, centered_face):
        source = random_image(600, 800, seed=12)
        rect = compute_crop_rectangle(600, 800, 800, 1200, centered_face, head_top_margin=50)

        out = apply_crop(source, rect, 800, 1200)

        assert out.size == (800, 1200)


class TestSelectLargestFace:
    """Test cases for select_largest_face."""

    def test_empty_returns_none(self):
        assert select_largest_face([]) is None

    def test_picks_largest_area(self):
        boxes = [
            BoundingBox(0, 0, 10, 10),
            BoundingBox(5, 5, 40, 30),
            BoundingBox(1, 1, 20, 20),
        ]

        assert select_largest_face(boxes) == BoundingBox(5, 5, 40, 30)

    def test_tie_prefers_later_box(self):
        first = BoundingBox(0, 0, 10, 20)
        second = BoundingBox(50, 50, 20, 10)

        assert select_largest_face([first, second]) is second

    def test_accepts_generator(self):
        largest = select_largest_face(BoundingBox(i, i, i + 1, i + 1) for i in range(5))

        assert largest.width == 5
