import pytest

from guardquote.core.errors import InvalidTransition
from guardquote.services import quote_status as qs

ALLOWED = {
    ("pending", "in_review"),
    ("pending", "rejected"),
    ("pending", "expired"),
    ("in_review", "quoted"),
    ("in_review", "rejected"),
    ("in_review", "expired"),
    ("quoted", "accepted"),
    ("quoted", "rejected"),
    ("quoted", "expired"),
}


@pytest.mark.parametrize("current", qs.STATUSES)
@pytest.mark.parametrize("target", qs.STATUSES)
def test_adjacency(current, target):
    assert qs.can_transition(current, target) == ((current, target) in ALLOWED)


@pytest.mark.parametrize("terminal", sorted(qs.TERMINAL))
def test_terminal_states_have_no_exits(terminal):
    assert qs.TRANSITIONS[terminal] == frozenset()


def test_check_transition_raises_with_states():
    with pytest.raises(InvalidTransition) as exc:
        qs.check_transition("pending", "accepted")
    assert (exc.value.current, exc.value.target) == ("pending", "accepted")
    assert exc.value.fields == ["status"]


def test_reexpiry_is_noop():
    assert qs.check_transition("expired", "expired") is False
    assert qs.check_transition("quoted", "expired") is True
