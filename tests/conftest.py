"""Shared fixtures for pixelsketch tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from image_helpers import make_image

from pixelsketch.models import RasterImage

# ---------------------------------------------------------------------------
# Image fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def red_2x2() -> RasterImage:
    """A fully opaque 2x2 pure-red image."""
    return RasterImage.filled(2, 2, (255, 0, 0, 255))


@pytest.fixture()
def gradient_sketch() -> RasterImage:
    """An 8x8 opaque RGB gradient with a transparent top-left corner."""
    rows = []
    for y in range(8):
        row = []
        for x in range(8):
            if x < 2 and y < 2:
                row.append((12, 34, 56, 0))
            else:
                row.append((x * 32, y * 32, (x + y) * 16, 255))
        rows.append(row)
    return make_image(rows)


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture()
def clean_pixelsketch_logger() -> Iterator[logging.Logger]:
    """Yield the ``pixelsketch`` logger with handlers removed before and after."""
    logger = logging.getLogger("pixelsketch")
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    yield logger
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
