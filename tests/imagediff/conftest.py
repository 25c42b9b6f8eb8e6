from __future__ import annotations

import pytest

from tests.imagediff.pixels import BLUE, DARK_GRAY, GRAY, RED, edge_buffer, fill_rect, solid_buffer


@pytest.fixture
def square_pair():
    before = solid_buffer(100, 100, RED)
    after = solid_buffer(100, 100, RED)
    fill_rect(after, 40, 40, 20, 20, BLUE)
    return before, after


@pytest.fixture
def edge_pair():
    return edge_buffer(GRAY), edge_buffer(DARK_GRAY)
