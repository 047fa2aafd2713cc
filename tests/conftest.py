"""
Pytest configuration and shared fixtures for Ghost Write tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import random

import fitz
import numpy as np
import pytest

from GW_Libs.BrushLib.raster_models import RasterBuffer


class FakeClock:
    """Manually advanced clock for throttled input handlers."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FailingRandom(random.Random):
    """Random source that raises once `fail_after` values have been drawn."""

    def __init__(self, fail_after, seed=0):
        super().__init__(seed)
        self.fail_after = fail_after
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.calls > self.fail_after:
            raise RuntimeError("sampling failed")
        return super().random()


@pytest.fixture
def white_buffer():
    """
    Provide a 100x100 opaque white buffer.

    Returns:
        RasterBuffer filled with (255, 255, 255, 255)
    """
    return RasterBuffer.blank(100, 100)


@pytest.fixture
def noise_buffer():
    """
    Provide a 120x120 buffer of seeded random opaque colors.

    Returns:
        RasterBuffer whose RGB channels are uniform noise
    """
    pixels = np.random.default_rng(1234).integers(0, 256, size=(120, 120, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return RasterBuffer(pixels)


@pytest.fixture
def hard_edge_buffer():
    """
    Provide a 40x20 buffer, black on the left half and white on the right.

    Returns:
        RasterBuffer with a vertical edge between columns 19 and 20
    """
    buffer = RasterBuffer.blank(40, 20)
    buffer.pixels[:, :20, :3] = 0
    return buffer


@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def failing_random():
    """Factory fixture for random sources that fail part way through."""
    return FailingRandom


@pytest.fixture
def sample_pdf_bytes():
    """
    Provide a three page PDF with a line of text on every page.

    Returns:
        PDF document bytes, pages are 200x100 points
    """
    document = fitz.open()
    for number in range(1, 4):
        page = document.new_page(width=200, height=100)
        page.insert_text((20, 60), f"Page {number}", fontsize=24)
    data = document.tobytes()
    document.close()
    return data
