import numpy as np
import pytest

from bayesnet import Assignment, AssignmentEnumerator, assignment_indices


def test_enumerator_counts_in_binary_order():
    events = [str(event) for event in AssignmentEnumerator(2)]
    assert events == ["FF", "FT", "TF", "TT"]


def test_enumerator_zero_arity_yields_single_empty_assignment():
    events = list(AssignmentEnumerator(0))
    assert events == [Assignment(())]
    assert len(AssignmentEnumerator(0)) == 1


@pytest.mark.parametrize("n", [1, 3, 5])
def test_enumerator_is_complete_and_restartable(n):
    enumerator = AssignmentEnumerator(n)
    first = list(enumerator)
    second = list(enumerator)
    assert first == second
    assert len(first) == len(set(first)) == 2**n == len(enumerator)
    assert [event.index for event in first] == list(range(2**n))


def test_enumerator_rejects_negative_arity():
    with pytest.raises(ValueError):
        AssignmentEnumerator(-1)


def test_assignment_is_a_value_key():
    counts = {Assignment.of(True, False): 1}
    counts[Assignment((True, False))] += 1
    assert counts == {Assignment.from_string("TF"): 2}
    assert hash(Assignment.of(1, 0)) == hash(Assignment.of(True, False))


def test_set_returns_a_copy():
    original = Assignment.of(False, False, False)
    changed = original.set(1, True)
    assert str(original) == "FFF"
    assert str(changed) == "FTF"
    assert changed.get(1) is True
    with pytest.raises(IndexError):
        original.set(3, True)


def test_from_index_inverts_index():
    for n in range(5):
        for index in range(2**n):
            assert Assignment.from_index(index, n).index == index
    with pytest.raises(ValueError):
        Assignment.from_index(4, 2)


def test_from_string_accepts_digits_and_rejects_garbage():
    assert Assignment.from_string("10") == Assignment.of(True, False)
    with pytest.raises(ValueError):
        Assignment.from_string("TX")


def test_assignment_indices_match_scalar_index():
    rng = np.random.default_rng(3)
    matrix = rng.random((50, 4)) < 0.5
    expected = [Assignment(tuple(row)).index for row in matrix]
    np.testing.assert_array_equal(assignment_indices(matrix), expected)
    assert assignment_indices(np.zeros((3, 0), dtype=bool)).tolist() == [0, 0, 0]
