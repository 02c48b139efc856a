import pytest

from familytree_layout import LayoutConfig, set_layout_config

from builders import parent, person, spouse


@pytest.fixture(autouse=True)
def _default_layout_config():
    set_layout_config(LayoutConfig())
    yield
    set_layout_config(LayoutConfig())


@pytest.fixture
def bird_family():
    people = [
        person('robert', 'Robert Bird', 1940),
        person('mary', 'Mary Bird', 1945),
        person('john', 'John Bird', 1970),
        person('sarah', 'Sarah Bird Johnson', 1975),
        person('michael', 'Michael Johnson', 1972),
        person('simon', 'Simon Bird', 1978),
        person('zuzana', 'Zuzana Bird', 1983),
        person('james', 'James Johnson', 2005),
        person('emma', 'Emma Bird', 2000),
    ]
    relationships = [
        spouse('robert', 'mary'),
        spouse('sarah', 'michael'),
        spouse('simon', 'zuzana'),
        parent('robert', 'john'), parent('mary', 'john'),
        parent('robert', 'sarah'), parent('mary', 'sarah'),
        parent('robert', 'simon'), parent('mary', 'simon'),
        parent('sarah', 'james'), parent('michael', 'james'),
        parent('simon', 'emma'), parent('zuzana', 'emma'),
    ]
    return people, relationships
