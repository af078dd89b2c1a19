import pytest

from app.constants.order_status import (
    AUTO_ADVANCE_TRANSITIONS,
    FULL_TRANSITIONS,
)
from app.services.exceptions import InvalidTransitionError
from app.services.status_progression import (
    current_auto_stage,
    next_auto_stage,
    next_full_stage,
)


@pytest.mark.parametrize(
    "current,expected",
    [
        ("pending", "approved"),
        ("approved", "washing"),
        ("washing", "drying"),
        ("drying", "folding"),
        ("folding", "ready"),
        ("ready", "completed"),
    ],
)
def test_full_sequence_edges(current, expected):
    assert next_full_stage(current) == expected
    assert FULL_TRANSITIONS[current] == expected


@pytest.mark.parametrize("current", ["completed", "cancelled", "", None])
def test_full_sequence_rejects_last_and_unknown(current):
    with pytest.raises(InvalidTransitionError):
        next_full_stage(current)


@pytest.mark.parametrize(
    "current,expected",
    [
        ("pending", "washing"),
        ("washing", "drying"),
        ("drying", "folding"),
        ("folding", "ready"),
        ("ready", "ready"),
    ],
)
def test_auto_sequence_edges(current, expected):
    assert next_auto_stage(current) == expected
    assert AUTO_ADVANCE_TRANSITIONS[current] == expected


def test_auto_sequence_has_no_approval_or_completion():
    assert "approved" not in AUTO_ADVANCE_TRANSITIONS
    assert "completed" not in AUTO_ADVANCE_TRANSITIONS


@pytest.mark.parametrize(
    "process_stage,status,expected",
    [
        ("drying", "washing", "drying"),
        (None, "folding", "folding"),
        ("approved", "approved", "pending"),
        (None, None, "pending"),
        ("bogus", "ready", "ready"),
        ("completed", "completed", "completed"),
        (None, "completed", "completed"),
    ],
)
def test_current_auto_stage_prefers_process_stage(process_stage, status, expected):
    assert current_auto_stage(process_stage, status) == expected


def test_auto_advance_keeps_completed():
    assert next_auto_stage("completed") == "completed"
