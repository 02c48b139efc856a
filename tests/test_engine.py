import logging

import pytest

from familytree_layout import (
    FamilyTreeLayoutEngine,
    LayoutConfig,
    check_layout,
    generate_layout,
    set_layout_config,
)

from builders import parent, person, spouse

PERSON_WIDTH = 160


def _center(node):
    return node.x + PERSON_WIDTH / 2


def test_parent_and_child_on_consecutive_rows():
    result = generate_layout([person('a'), person('b')], [parent('a', 'b')])

    a, b = result.node('a'), result.node('b')
    assert (a.depth, b.depth) == (0, 1)
    assert b.y > a.y
    assert (a.x, a.y) == (100, 0)
    assert (b.x, b.y) == (100, 170)

    union = result.marriage('a')
    assert union.key == ('a',)
    assert union.explicit is False
    assert [c.id for c in union.children] == ['b']


def test_childless_spouses_form_explicit_pair():
    people = [person('s1', birth_year=1950), person('s2', birth_year=1952)]
    result = generate_layout(people, [spouse('s1', 's2')])

    s1, s2 = result.node('s1'), result.node('s2')
    assert s1.depth == s2.depth == 0
    assert s2.x - (s1.x + PERSON_WIDTH) == 40

    union = result.marriage('s1', 's2')
    assert union.explicit is True
    assert union.children == []
    assert union.x == pytest.approx((_center(s1) + _center(s2)) / 2)
    assert union.y == 0


def test_three_children_centered_and_spaced_by_child_gap():
    people = [
        person('p', birth_year=1950),
        person('q', birth_year=1952),
        person('c3', birth_year=1985),
        person('c1', birth_year=1980),
        person('c2', birth_year=1982),
    ]
    relationships = [spouse('p', 'q')]
    for child in ('c3', 'c1', 'c2'):
        relationships += [parent('p', child), parent('q', child)]

    result = generate_layout(people, relationships, LayoutConfig(child_gap=240))

    union = result.marriage('p', 'q')
    children = [result.node(cid) for cid in ('c1', 'c2', 'c3')]
    assert all(child.depth == 1 for child in children)
    centers = [_center(child) for child in children]
    assert centers[1] == pytest.approx(union.x)
    assert centers[1] - centers[0] == pytest.approx(240)
    assert centers[2] - centers[1] == pytest.approx(240)
    assert [c.id for c in sorted(children, key=lambda n: n.x)] == ['c1', 'c2', 'c3']


def test_default_child_gap_never_breaks_minimum_gap():
    people = [person('p', birth_year=1950), person('q', birth_year=1952)]
    people += [person(f'c{i}', birth_year=1980 + i) for i in range(4)]
    relationships = [spouse('p', 'q')]
    for i in range(4):
        relationships += [parent('p', f'c{i}'), parent('q', f'c{i}')]

    result = generate_layout(people, relationships)

    xs = sorted(result.node(f'c{i}').x for i in range(4))
    assert [b - a for a, b in zip(xs, xs[1:])] == [200, 200, 200]
    assert check_layout(result, relationships) == []


def test_shared_child_without_spouse_edge_creates_implicit_union():
    people = [person('p', birth_year=1950), person('q', birth_year=1955), person('c', birth_year=1980)]
    relationships = [parent('p', 'c'), parent('q', 'c')]

    result = generate_layout(people, relationships)

    union = result.marriage('p', 'q')
    assert union.explicit is False
    assert [c.id for c in union.children] == ['c']
    assert result.node('c').depth == 1
    assert result.node('p').depth == result.node('q').depth == 0
    assert _center(result.node('c')) == pytest.approx(union.x)


def test_isolated_person_gets_default_slot():
    result = generate_layout([person('z')], [])

    node = result.node('z')
    assert node.depth == 0
    assert (node.x, node.y) == (100, 0)
    assert result.marriages == []
    assert node.spouses == node.children == node.parents == []


def test_bird_family_rows_and_centering(bird_family):
    people, relationships = bird_family
    result = FamilyTreeLayoutEngine().generate_layout(people, relationships)

    depth = {n.person.id: n.depth for n in result.nodes}
    assert depth == {
        'robert': 0, 'mary': 0,
        'john': 1, 'sarah': 1, 'michael': 1, 'simon': 1, 'zuzana': 1,
        'james': 2, 'emma': 2,
    }

    explicit = {m.id for m in result.marriages if m.explicit}
    assert explicit == {'mary-robert', 'michael-sarah', 'simon-zuzana'}
    assert all(m.explicit for m in result.marriages)

    emma, james = result.node('emma'), result.node('james')
    assert _center(emma) == pytest.approx(result.marriage('simon', 'zuzana').x)
    assert _center(james) == pytest.approx(result.marriage('sarah', 'michael').x)
    assert check_layout(result, relationships) == []


def test_every_child_hangs_from_exactly_one_union(bird_family):
    people, relationships = bird_family
    result = generate_layout(people, relationships)

    for node in result.nodes:
        if not node.parents:
            continue
        anchors = [m for m in result.marriages if node.person in m.children]
        assert len(anchors) == 1
        assert set(anchors[0].parent_ids) == {p.id for p in node.parents}


def test_layout_is_idempotent_and_engine_keeps_no_state(bird_family):
    people, relationships = bird_family
    engine = FamilyTreeLayoutEngine()

    first = engine.generate_layout(people, relationships).to_dict()
    engine.generate_layout([person('x')], [])
    second = engine.generate_layout(people, relationships).to_dict()

    assert first == second
    assert first == generate_layout(people, relationships).to_dict()


def test_every_person_has_exactly_one_node():
    people = [person('a'), person('b'), person('c'), person('a', 'Duplicate A')]
    relationships = [parent('a', 'b'), spouse('b', 'ghost'), parent('nobody', 'c')]

    result = generate_layout(people, relationships)

    ids = [n.person.id for n in result.nodes]
    assert sorted(ids) == ['a', 'b', 'c']
    assert result.node('a').person.full_name == 'A'


def test_accepts_plain_records():
    people = [
        {'id': 'a', 'full_name': 'Ann', 'birth_year': '1950', 'photo_url': 'a.png'},
        {'id': 'b', 'full_name': 'Bob', 'birth_year': 1980},
    ]
    relationships = [{'from_person_id': 'a', 'to_person_id': 'b', 'relationship_type': 'parent'}]

    result = generate_layout(people, relationships)

    node = result.node('a')
    assert node.person.birth_year == 1950
    assert node.person.extra == {'photo_url': 'a.png'}
    assert result.to_dict()['nodes'][0]['person']['photo_url'] == 'a.png'
    assert result.node('b').depth == 1


def test_cyclic_ancestry_terminates_with_warning(caplog):
    people = [person('a'), person('b')]
    relationships = [parent('a', 'b'), parent('b', 'a')]

    with caplog.at_level(logging.WARNING, logger='familytree_layout'):
        result = generate_layout(people, relationships)

    assert sorted(n.person.id for n in result.nodes) == ['a', 'b']
    assert min(n.depth for n in result.nodes) == 0
    assert 'did not settle' in caplog.text


def test_global_config_and_overrides():
    set_layout_config(LayoutConfig(padding=10))
    engine = FamilyTreeLayoutEngine(gridY=100)

    result = engine.generate_layout([person('a'), person('b')], [parent('a', 'b')])

    assert engine.config.padding == 10
    assert result.node('a').x == 10
    assert result.node('b').y == 100


def test_married_children_stay_with_their_spouse(bird_family):
    people, relationships = bird_family
    result = generate_layout(people, relationships)

    for a, b in (('michael', 'sarah'), ('simon', 'zuzana')):
        left, right = result.node(a), result.node(b)
        assert left.y == right.y
        assert right.x - left.x == PERSON_WIDTH + 40


def test_incomplete_relationship_records_are_skipped(caplog):
    people = [{'id': 'a'}, {'id': 'b'}]
    relationships = [
        {'from_person_id': 'a', 'to_person_id': None, 'relationship_type': 'parent'},
        {'from_person_id': 'a', 'relationship_type': 'spouse'},
        {'from_person_id': 'a', 'to_person_id': 'b'},
        {'from_person_id': 'a', 'to_person_id': 'b', 'relationship_type': 'parent'},
    ]

    with caplog.at_level(logging.WARNING, logger='familytree_layout.layout.engine'):
        result = generate_layout(people, relationships)

    assert (result.node('a').depth, result.node('b').depth) == (0, 1)
    assert [c.id for c in result.marriage('a').children] == ['b']
    assert 'Skipped 3 incomplete relationship record(s)' in caplog.text
