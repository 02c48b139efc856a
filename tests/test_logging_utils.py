import logging

import numpy as np

from familytree_layout import generate_layout
from familytree_layout.logging_utils import _safe_repr, debug_log_call

from builders import parent, person


def test_safe_repr_summarises_arrays_and_models():
    assert _safe_repr(np.array([1.0, 3.0])) == "ndarray(shape=(2,), dtype=float64), min=1, max=3"
    assert _safe_repr(person('ann')) == "Person('ann')"
    assert _safe_repr(list(range(10))).endswith("... (10 items)]")


def test_debug_log_call_traces_only_when_enabled(caplog):
    logger = logging.getLogger("familytree_layout.tests")

    @debug_log_call(logger)
    def double(value):
        return value * 2

    with caplog.at_level(logging.INFO, logger="familytree_layout.tests"):
        assert double(2) == 4
    assert caplog.text == ""

    with caplog.at_level(logging.DEBUG, logger="familytree_layout.tests"):
        double(3)
    assert "Entering" in caplog.text and "-> 6" in caplog.text
    assert debug_log_call(logger)(double) is double


def test_pipeline_functions_log_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="familytree_layout"):
        generate_layout([person('a'), person('b')], [parent('a', 'b')])

    assert "Entering build_index" in caplog.text
    assert "Entering position_people" in caplog.text
