import pytest

pytest.importorskip("pygame")

from gridstar.app.viewer import TAG_COLORS, cell_at  # noqa: E402
from gridstar.core.types import Tag  # noqa: E402


def test_every_tag_has_a_colour():
    assert set(TAG_COLORS) == set(Tag)
    assert TAG_COLORS[Tag.OBSTACLE] == (0, 0, 0)


@pytest.mark.parametrize("pos,expected", [
    ((16, 16), (0, 0)),
    ((39, 16), (0, 0)),
    ((40, 16), (1, 0)),
    ((16 + 24 * 3 + 5, 16 + 24 * 2), (3, 2)),
    ((10, 10), (-1, -1)),
])
def test_cell_at_maps_pixels_to_cells(pos, expected):
    assert cell_at(pos, (16, 16), 24) == expected
