import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from bayesnet import Assignment, AssignmentEnumerator, DomainError, WeightedSet


@st.composite
def weight_tables(draw):
    n = draw(st.integers(min_value=0, max_value=4))
    weights = draw(
        st.lists(
            st.floats(min_value=0.0, max_value=1e6, allow_nan=False, allow_subnormal=False),
            min_size=2**n,
            max_size=2**n,
        )
    )
    return n, weights


@given(st.integers(min_value=0, max_value=8))
def test_domain_is_every_assignment_once(n):
    weights = WeightedSet(n)
    assert len(weights) == 2**n
    assert set(weights.events()) == set(AssignmentEnumerator(n))
    assert all(weight == 0.0 for _, weight in weights.items())


@given(weight_tables())
def test_normalize_sums_to_one_or_leaves_zero_set(table):
    n, values = table
    weights = WeightedSet.from_weights(n, values)
    before = weights.to_array()
    weights.normalize()
    if before.sum() > 0:
        assert np.isclose(weights.total(), 1.0)
        np.testing.assert_allclose(weights.to_array(), before / before.sum())
    else:
        np.testing.assert_array_equal(weights.to_array(), before)


def test_add_increment_and_read():
    weights = WeightedSet(2)
    tf = Assignment.from_string("TF")
    weights.add_event(tf, 2.0)
    weights.increment(tf, 0.5)
    weights.increment(Assignment.from_string("FF"), 1.5)
    assert weights.get_weight(tf) == 2.5
    assert weights[Assignment.from_string("FF")] == 1.5
    weights.add_event(tf, 1.0)
    assert weights.get_weight(tf) == 1.0
    assert weights.as_dict() == {"FF": 1.5, "FT": 0.0, "TF": 1.0, "TT": 0.0}


def test_normalize_divides_by_total():
    weights = WeightedSet.from_weights(2, [1, 2, 3, 4])
    assert weights.normalize() is weights
    np.testing.assert_allclose(weights.to_array(), [0.1, 0.2, 0.3, 0.4])


def test_all_zero_normalize_is_a_noop():
    weights = WeightedSet(3)
    weights.normalize()
    assert weights.total() == 0.0


def test_foreign_assignments_fail_fast():
    weights = WeightedSet(2)
    with pytest.raises(DomainError):
        weights.get_weight(Assignment.of(True))
    with pytest.raises(DomainError):
        weights.increment(Assignment.of(True, True, True), 1.0)
    with pytest.raises(DomainError):
        weights.add_event((True, False), 1.0)
    with pytest.raises(LookupError):
        weights.get_weight(Assignment(()))
    assert Assignment.of(True, False) in weights
    assert Assignment.of(True) not in weights


def test_tally_counts_rows_and_weights():
    weights = WeightedSet(2)
    rows = np.array([[True, False], [True, False], [False, True]])
    weights.tally(rows)
    assert weights.as_dict() == {"FF": 0.0, "FT": 1.0, "TF": 2.0, "TT": 0.0}
    weights.tally(rows[:1], [0.25])
    assert weights.get_weight(Assignment.from_string("TF")) == 2.25
    with pytest.raises(DomainError):
        weights.tally(np.zeros((2, 3), dtype=bool))


def test_combine_adds_partial_results():
    left = WeightedSet.from_weights(1, [1.0, 2.0])
    right = WeightedSet.from_weights(1, [0.5, 0.5])
    left.combine(right)
    np.testing.assert_allclose(left.to_array(), [1.5, 2.5])
    with pytest.raises(DomainError):
        left.combine(WeightedSet(2))


def test_from_weights_checks_length():
    with pytest.raises(DomainError):
        WeightedSet.from_weights(2, [0.5, 0.5])


def test_string_lists_each_event():
    weights = WeightedSet.from_weights(1, [0.25, 0.75])
    assert str(weights) == "F --> 0.25\nT --> 0.75"
    assert weights.copy() == weights


def test_events_are_the_domain_and_items_carry_weights():
    weights = WeightedSet.from_weights(1, [0.25, 0.75])
    assert weights.events() == (Assignment.of(False), Assignment.of(True))
    assert list(weights.items()) == [(Assignment.of(False), 0.25), (Assignment.of(True), 0.75)]
