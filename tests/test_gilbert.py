import pytest

from img_scramble.gilbert import gilbert2d, generate2d


# none of these has odd longer side and even shorter side above 2
SIZES = [(1, 1), (1, 7), (7, 1), (2, 2), (3, 2), (2, 3), (4, 4), (5, 3), (8, 8),
         (13, 7), (7, 13), (17, 31), (64, 48), (100, 3), (3, 100), (37, 37)]


@pytest.mark.parametrize('width, height', SIZES)
def test_curve_visits_every_cell_once(width, height):
    curve = gilbert2d(width, height)

    assert len(curve) == width * height
    assert set(curve) == {(x, y) for x in range(width) for y in range(height)}


@pytest.mark.parametrize('width, height', SIZES)
def test_consecutive_cells_are_neighbours(width, height):
    curve = gilbert2d(width, height)

    for (x1, y1), (x2, y2) in zip(curve, curve[1:]):
        assert abs(x1 - x2) + abs(y1 - y2) == 1


@pytest.mark.parametrize('width, height', [(5, 4), (4, 5), (9, 6), (7, 4), (13, 10)])
def test_single_diagonal_step_for_odd_long_even_short_side(width, height):
    curve = gilbert2d(width, height)
    steps = [(abs(x1 - x2), abs(y1 - y2)) for (x1, y1), (x2, y2) in zip(curve, curve[1:])]

    assert all(max(step) == 1 for step in steps)
    assert steps.count((1, 1)) == 1


def test_curve_is_reproducible():
    assert gilbert2d(23, 11) == gilbert2d(23, 11)


def test_small_curve():
    assert gilbert2d(3, 2) == [(0, 0), (0, 1), (1, 1), (2, 1), (2, 0), (1, 0)]


def test_single_row_and_column():
    assert gilbert2d(4, 1) == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert gilbert2d(1, 3) == [(0, 0), (0, 1), (0, 2)]


def test_curve_starts_in_origin():
    for width, height in SIZES:
        assert gilbert2d(width, height)[0] == (0, 0)


def test_negative_vectors_use_floor_division():
    # area spanned backwards from (4, 2), a = (-5, 0), b = (0, -3)
    cells = generate2d(4, 2, -5, 0, 0, -3)

    assert sorted(cells) == sorted((x, y) for x in range(5) for y in range(3))
