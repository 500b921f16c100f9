"""Tests for the directory comparison workflow."""

import json
from unittest.mock import Mock

import pytest

from portrait_diff import InvalidImage, SimilarityEngine
from portrait_diff.comparison import ImageComparator
from portrait_diff.image_io import load_image


@pytest.fixture
def pair_dirs(tmp_path, write_image, make_image):
    """original/ and target/ with two matching pairs and one orphan."""
    write_image("original/same.png", make_image(40, 30, (10, 20, 30)))
    write_image("target/same.png", make_image(40, 30, (10, 20, 30)))

    write_image("original/shifted.png", make_image(400, 300, (100, 150, 200)))
    write_image("target/shifted.png", make_image(200, 350, (120, 170, 220)))

    write_image("original/orphan.png", make_image(10, 10))
    return tmp_path


class TestImageComparator:
    """Test cases for ImageComparator."""

    def _comparator(self, root, **kwargs):
        return ImageComparator(
            original_dir=root / "original",
            target_dir=root / "target",
            output_dir=root / "output",
            **kwargs,
        )

    def test_compares_common_keys_in_order(self, pair_dirs):
        comparator = self._comparator(pair_dirs)

        records = comparator.run()

        assert [r.key for r in records] == ["same", "shifted"]
        assert all(r.succeeded for r in records)
        assert records[0].similarity == 100.0
        assert records[1].similarity == 92.16

    def test_writes_diff_images_and_records(self, pair_dirs):
        comparator = self._comparator(pair_dirs)
        comparator.run()
        output = pair_dirs / "output"

        diff = load_image(output / "shifted_diff.png")
        assert diff.size == (400, 350)
        assert diff.pixel(0, 0) == (40, 10, 10)

        with open(output / "shifted_result.json", encoding="utf-8") as f:
            record = json.load(f)
        assert record["status"] == "success"
        assert record["similarity"] == 92.16
        assert record["differences"]["width_diff"] == -200
        assert record["differences"]["height_diff"] == 50
        assert record["diff_image_path"].endswith("shifted_diff.png")
        assert not (output / "orphan_result.json").exists()

    def test_failing_pair_is_isolated(self, pair_dirs):
        real = SimilarityEngine()

        def compare(a, b):
            if a.width == 40:
                raise InvalidImage("broken")
            return real.compare(a, b)

        engine = Mock(spec=SimilarityEngine)
        engine.compare.side_effect = compare
        comparator = self._comparator(pair_dirs, engine=engine)

        records = comparator.run()

        assert records[0].status == "error"
        assert records[0].error == "broken"
        assert records[1].status == "success"
        assert comparator.summary()["failed"] == 1

        with open(pair_dirs / "output" / "same_result.json", encoding="utf-8") as f:
            assert json.load(f)["error"] == "broken"

    def test_undecodable_file_is_skipped(self, pair_dirs):
        (pair_dirs / "target" / "orphan.png").write_bytes(b"not an image")
        comparator = self._comparator(pair_dirs)

        records = comparator.run()

        assert "orphan" not in comparator.target_images
        assert [r.key for r in records] == ["same", "shifted"]

    def test_callback_invoked_per_pair(self, pair_dirs):
        seen = []
        comparator = self._comparator(pair_dirs, on_compared=lambda r: seen.append(r.key))

        comparator.run()

        assert seen == ["same", "shifted"]

    def test_summary_and_status(self, pair_dirs):
        comparator = self._comparator(pair_dirs)
        comparator.run()

        summary = comparator.summary()
        assert summary["total"] == 2
        assert summary["successful"] == 2
        assert summary["average_similarity"] == pytest.approx(96.08)

        status = comparator.get_status()
        assert status["original_images"] == 3
        assert status["target_images"] == 2
        assert status["comparisons"] == 2

    def test_empty_directories(self, tmp_path):
        comparator = self._comparator(tmp_path)

        assert comparator.run() == []
        assert comparator.summary()["average_similarity"] is None
        assert (tmp_path / "original").is_dir()
