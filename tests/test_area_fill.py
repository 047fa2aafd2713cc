"""
Tests for the chunked area fill orchestrator.

Tests cover:
- Grid spacing and point counts
- Progress reporting and completion
- Degenerate selections
- Cooperative cancellation
- Error handling
- Asyncio driver
- Configuration
"""

import asyncio
import random
import unittest

import numpy as np
import pytest

from GW_Libs.BrushLib.area_fill import (
    AreaFillConfig,
    AreaFillError,
    AreaFillOperation,
    CancelToken,
    apply_area_fill,
    apply_area_fill_async,
    build_grid_points,
    compute_grid_size,
    count_grid_points,
)
from GW_Libs.BrushLib.raster_models import AnnotatedArea, Point, RasterBuffer, SelectionRect


class TestGrid(unittest.TestCase):
    """Test grid spacing and point generation."""

    def test_grid_size(self):
        self.assertEqual(compute_grid_size(20), 6)
        self.assertEqual(compute_grid_size(15), 5)
        self.assertEqual(compute_grid_size(9), 5)
        self.assertEqual(compute_grid_size(60), 20)

    def test_count_includes_both_edges(self):
        self.assertEqual(count_grid_points(100, 50, 5), 21 * 11)
        self.assertEqual(count_grid_points(10, 10, 5), 9)

    def test_points_are_row_major(self):
        points = build_grid_points(SelectionRect(10, 20, 20, 25), 5)
        self.assertEqual(points, [
            Point(10, 20), Point(15, 20), Point(20, 20),
            Point(10, 25), Point(15, 25), Point(20, 25),
        ])

    def test_points_match_count(self):
        rect = SelectionRect(0, 0, 100, 50)
        self.assertEqual(len(build_grid_points(rect, 5)), count_grid_points(100, 50, 5))

    def test_invalid_grid_size(self):
        with self.assertRaises(ValueError):
            build_grid_points(SelectionRect(0, 0, 10, 10), 0)


class TestAreaFillOperation:
    """Test chunking, progress and completion."""

    def test_chunk_count(self, noise_buffer):
        original = noise_buffer.freeze()
        operation = AreaFillOperation(SelectionRect(0, 0, 100, 50), noise_buffer, original, 15)
        assert operation.grid_size == 5
        assert len(operation.points) == 231
        assert operation.total_chunks == 3

    def test_chunk_size_from_config(self, noise_buffer):
        original = noise_buffer.freeze()
        operation = AreaFillOperation(
            SelectionRect(0, 0, 100, 50), noise_buffer, original, 15,
            config=AreaFillConfig(chunk_size=50),
        )
        assert operation.total_chunks == 5

    def test_rect_is_normalized_and_rounded(self, noise_buffer):
        original = noise_buffer.freeze()
        operation = AreaFillOperation(
            SelectionRect(60.4, 40.5, 10.6, 9.2), noise_buffer, original, 15
        )
        assert operation.rect == SelectionRect(11, 9, 60, 41)

    def test_progress_and_completion(self, noise_buffer, seeded_rng):
        original = noise_buffer.freeze()
        progress = []
        completed = []

        result = apply_area_fill(
            SelectionRect(10, 10, 110, 110),
            noise_buffer,
            original,
            brush_size=15,
            on_progress=progress.append,
            on_complete=completed.append,
            rng=seeded_rng,
        )

        expected = AnnotatedArea(type="area-magic-brush", x=10, y=10, x2=110, y2=110)
        assert result == expected
        assert completed == [expected]
        assert progress == [0, 20, 40, 60, 80, 100]
        assert not np.array_equal(noise_buffer.pixels, original.pixels)

    def test_pixels_outside_padded_rect_are_unchanged(self, noise_buffer, seeded_rng):
        original = noise_buffer.freeze()
        apply_area_fill(SelectionRect(40, 40, 60, 60), noise_buffer, original, 15, rng=seeded_rng)

        # brush reach is 7px, smoothing reaches 10px past the rect
        np.testing.assert_array_equal(noise_buffer.pixels[:29], original.pixels[:29])
        np.testing.assert_array_equal(noise_buffer.pixels[72:], original.pixels[72:])
        np.testing.assert_array_equal(noise_buffer.pixels[:, :29], original.pixels[:, :29])
        np.testing.assert_array_equal(noise_buffer.pixels[:, 72:], original.pixels[:, 72:])

    def test_alpha_is_untouched(self, noise_buffer, seeded_rng):
        noise_buffer.pixels[:, :, 3] = 42
        original = noise_buffer.freeze()
        apply_area_fill(SelectionRect(10, 10, 60, 60), noise_buffer, original, 15, rng=seeded_rng)
        assert np.all(noise_buffer.pixels[:, :, 3] == 42)

    def test_seeded_fills_are_identical(self, noise_buffer):
        original = noise_buffer.freeze()
        first, second = original.copy(), original.copy()
        rect = SelectionRect(20, 20, 80, 70)

        apply_area_fill(rect, first, original, 18, rng=random.Random(7))
        apply_area_fill(rect, second, original, 18, rng=random.Random(7))

        np.testing.assert_array_equal(first.pixels, second.pixels)

    @pytest.mark.parametrize("rect", [
        SelectionRect(10, 10, 13, 50),
        SelectionRect(10, 10, 50, 14),
        SelectionRect(10, 10, 10, 10),
    ])
    def test_degenerate_selection_is_a_no_op(self, noise_buffer, rect):
        original = noise_buffer.freeze()
        progress = []
        completed = []

        result = apply_area_fill(
            rect, noise_buffer, original, 15,
            on_progress=progress.append, on_complete=completed.append,
        )

        assert result is None
        assert progress == []
        assert completed == []
        np.testing.assert_array_equal(noise_buffer.pixels, original.pixels)

    def test_selection_size_is_checked_before_rounding(self, noise_buffer):
        original = noise_buffer.freeze()
        progress = []

        # 4.6px wide, but the rounded corners 0 and 5 are 5px apart
        operation = AreaFillOperation(
            SelectionRect(0.4, 10, 5.0, 60), noise_buffer, original, 15,
            on_progress=progress.append,
        )

        assert operation.is_degenerate
        assert operation.points == []
        assert operation.run() is None
        assert progress == []
        np.testing.assert_array_equal(noise_buffer.pixels, original.pixels)

    def test_invalid_arguments(self, noise_buffer):
        original = noise_buffer.freeze()
        with pytest.raises(ValueError):
            AreaFillOperation(SelectionRect(0, 0, 50, 50), noise_buffer, original, 0)
        with pytest.raises(ValueError):
            AreaFillOperation(
                SelectionRect(0, 0, 50, 50), RasterBuffer.blank(10, 10), original, 15
            )
        with pytest.raises(ValueError):
            AreaFillOperation(
                SelectionRect(0, 0, 50, 50), noise_buffer, original, 15,
                config=AreaFillConfig(chunk_size=0),
            )


class TestCancellation:
    """Test cooperative cancellation between chunks."""

    def test_cancel_after_first_chunk(self, noise_buffer, seeded_rng):
        original = noise_buffer.freeze()
        token = CancelToken()
        snapshots = []
        completed = []

        def on_progress(percent):
            if percent > 0 and not token.cancelled:
                snapshots.append(noise_buffer.pixels.copy())
                token.cancel()

        result = apply_area_fill(
            SelectionRect(10, 10, 110, 110), noise_buffer, original, 15,
            on_progress=on_progress, on_complete=completed.append,
            cancel_token=token, rng=seeded_rng,
        )

        assert result is None
        assert completed == []
        assert len(snapshots) == 1
        # no later chunk and no smoothing pass touched the buffer
        np.testing.assert_array_equal(noise_buffer.pixels, snapshots[0])

    def test_cancel_before_start(self, noise_buffer):
        original = noise_buffer.freeze()
        token = CancelToken()
        token.cancel()
        progress = []

        operation = AreaFillOperation(
            SelectionRect(10, 10, 110, 110), noise_buffer, original, 15,
            on_progress=progress.append, cancel_token=token,
        )
        assert operation.run() is None
        assert operation.cancelled
        assert operation.chunks_done == 0
        assert progress == [0]
        np.testing.assert_array_equal(noise_buffer.pixels, original.pixels)

    def test_cancel_while_iterating(self, noise_buffer, seeded_rng):
        original = noise_buffer.freeze()
        operation = AreaFillOperation(
            SelectionRect(10, 10, 110, 110), noise_buffer, original, 15, rng=seeded_rng,
        )
        chunks = operation.iter_chunks()
        assert next(chunks) == 20
        operation.cancel()

        assert list(chunks) == []
        assert operation.chunks_done == 1
        assert not operation.completed


class TestErrorHandling:
    """Test failures raised inside a chunk."""

    def test_failure_resets_progress_and_raises(self, noise_buffer, failing_random):
        original = noise_buffer.freeze()
        progress = []
        completed = []
        # 100 points of 25 samples with two draws each
        rng = failing_random(fail_after=5000)

        with pytest.raises(AreaFillError) as excinfo:
            apply_area_fill(
                SelectionRect(10, 10, 110, 110), noise_buffer, original, 15,
                on_progress=progress.append, on_complete=completed.append, rng=rng,
            )

        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert "2/5" in str(excinfo.value)
        assert progress == [0, 20, 0]
        assert completed == []
        # the first chunk is not rolled back
        assert not np.array_equal(noise_buffer.pixels, original.pixels)


class TestAsyncDriver:
    """Test the asyncio variant."""

    def test_async_fill_completes(self, noise_buffer, seeded_rng):
        original = noise_buffer.freeze()
        progress = []

        result = asyncio.run(apply_area_fill_async(
            SelectionRect(10, 10, 110, 110), noise_buffer, original, 15,
            on_progress=progress.append, rng=seeded_rng,
        ))

        assert result.type == "area-magic-brush"
        assert progress[-1] == 100

    def test_async_fill_yields_between_chunks(self, noise_buffer, seeded_rng):
        original = noise_buffer.freeze()
        progress = []
        observed = []

        async def scenario():
            async def watcher():
                while True:
                    observed.append(len(progress))
                    await asyncio.sleep(0)

            task = asyncio.create_task(watcher())
            result = await apply_area_fill_async(
                SelectionRect(10, 10, 110, 110), noise_buffer, original, 15,
                on_progress=progress.append, rng=seeded_rng,
            )
            task.cancel()
            return result

        assert asyncio.run(scenario()) is not None
        assert any(1 < count < len(progress) for count in observed)

    def test_async_fill_matches_sync_fill(self, noise_buffer):
        original = noise_buffer.freeze()
        sync_buffer = original.copy()
        rect = SelectionRect(15, 15, 75, 60)

        apply_area_fill(rect, sync_buffer, original, 15, rng=random.Random(11))
        asyncio.run(apply_area_fill_async(rect, noise_buffer, original, 15, rng=random.Random(11)))

        np.testing.assert_array_equal(noise_buffer.pixels, sync_buffer.pixels)


class TestAreaFillConfig(unittest.TestCase):
    """Test AreaFillConfig serialization."""

    def test_defaults(self):
        config = AreaFillConfig()
        self.assertEqual(config.chunk_size, 100)
        self.assertEqual(config.min_selection_size, 5)
        self.assertEqual(config.smoothing_kernel_size, 5)
        self.assertEqual(config.color_sigma, 150.0)

    def test_from_dict_ignores_unknown_keys(self):
        config = AreaFillConfig.from_dict({"chunk_size": 25, "unknown": True})
        self.assertEqual(config.chunk_size, 25)
        self.assertEqual(config.smoothing_padding, 10)

    def test_to_dict_round_trip(self):
        config = AreaFillConfig(chunk_size=10, color_sigma=80.0)
        self.assertEqual(AreaFillConfig.from_dict(config.to_dict()), config)
