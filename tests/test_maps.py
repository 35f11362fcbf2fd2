import pytest

from memedit.maps import Maps


@pytest.mark.parametrize(
    "scope, expected",
    [
        ((11, 21), [(11, 20)]),
        ((11, 19), [(11, 19)]),
        ((9, 19), [(10, 19)]),
        ((9, 21), [(10, 20)]),
    ],
)
def test_trim_by_scope_one_pair(scope, expected):
    maps = Maps()
    maps.push((10, 20))
    maps.trim_by_scope(scope)
    assert list(maps) == expected
    assert len(maps) == len(expected)


@pytest.mark.parametrize(
    "scope, expected",
    [
        ((9, 19), [(10, 19)]),
        ((20, 30), [(20, 20), (30, 30)]),
        ((21, 29), []),
        ((15, 35), [(15, 20), (30, 35)]),
        ((31, 45), [(31, 40)]),
        ((9, 45), [(10, 20), (30, 40)]),
    ],
)
def test_trim_by_scope_two_pairs(scope, expected):
    maps = Maps()
    maps.push((10, 20))
    maps.push((30, 40))
    maps.trim_by_scope(scope)
    assert len(maps) == len(expected)
    for index, pair in enumerate(expected):
        assert maps[index] == pair


def test_index_out_of_range():
    maps = Maps([(1, 2)])
    assert maps[0] == (1, 2)
    with pytest.raises(IndexError):
        maps[1]


def test_has_pair():
    maps = Maps([(10, 20), (30, 40)])
    assert maps.has_pair((5, 25)) is True
    assert maps.has_pair((11, 19)) is False


def test_clear():
    maps = Maps([(10, 20)])
    maps.clear()
    assert len(maps) == 0