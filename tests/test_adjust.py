import pytest

from familytree_layout import (
    auto_space,
    center_layout,
    check_layout,
    detect_collisions,
    generate_layout,
    move_person,
)

from builders import parent, person, spouse


@pytest.fixture
def couple():
    people = [person('s1', birth_year=1950), person('s2', birth_year=1952)]
    relationships = [spouse('s1', 's2')]
    return generate_layout(people, relationships), relationships


def test_center_layout_returns_shifted_copy(couple):
    result, _ = couple

    centred = center_layout(result)

    assert [n.x for n in centred.nodes] == [-180, 20]
    assert all(n.y == 100 for n in centred.nodes)
    union = centred.marriage('s1', 's2')
    assert (union.x, union.y) == (0, 100)
    assert centred.dimensions.min_x == -280
    assert centred.dimensions.max_x == 280
    assert [n.x for n in result.nodes] == [100, 300]


def test_center_layout_of_empty_result():
    empty = generate_layout([], [])
    assert center_layout(empty).nodes == []


def test_move_person_drags_union_along(couple):
    result, _ = couple

    moved = move_person(result, 's2', 500, 0)

    assert moved.node('s2').x == 500
    assert moved.marriage('s1', 's2').x == pytest.approx(380)
    assert moved.dimensions.max_x == 760
    assert result.node('s2').x == 300


def test_move_unknown_person(couple):
    result, _ = couple
    with pytest.raises(KeyError):
        move_person(result, 'nobody', 0, 0)


def test_detect_collisions_uses_buffer(couple):
    result, _ = couple
    assert detect_collisions(result.nodes) == []

    close = move_person(result, 's2', 250, 0)
    assert detect_collisions(close.nodes) == [('s1', 's2')]
    assert detect_collisions(close.nodes, buffer=-20) == []


def test_check_layout_flags_tampered_rows(couple):
    result, relationships = couple
    assert check_layout(result, relationships) == []

    result.node('s2').x = 200
    kinds = [v.kind for v in check_layout(result, relationships)]
    assert kinds == ['row_overlap']


def test_check_layout_flags_depth_problems():
    people = [person('p'), person('c'), person('w')]
    relationships = [parent('p', 'c'), spouse('c', 'w')]
    result = generate_layout(people, relationships)
    assert check_layout(result, relationships) == []

    result.node('c').depth = 0
    result.node('c').x = 1000
    kinds = sorted(v.kind for v in check_layout(result, relationships))
    assert kinds == ['depth_order', 'marriage_depth', 'spouse_depth']

    for node in result.nodes:
        node.depth += 1
    kinds = sorted(v.kind for v in check_layout(result, relationships))
    assert 'not_normalized' in kinds
    assert 'marriage_depth' in kinds


def test_auto_space_spreads_crowded_row(couple):
    result, relationships = couple
    crowded = move_person(result, 's2', 150, 0)

    spaced = auto_space(crowded)

    assert [n.x for n in spaced.nodes] == [100, 300]
    assert spaced.marriage('s1', 's2').x == pytest.approx(280)
    assert check_layout(spaced, relationships) == []
    assert crowded.node('s2').x == 150


def test_auto_space_pushes_the_rest_of_the_row():
    people = [person('a'), person('b'), person('c')]
    result = generate_layout(people, [])
    result.node('b').x = 120

    spaced = auto_space(result)

    assert [n.x for n in spaced.nodes] == [100, 300, 680]
