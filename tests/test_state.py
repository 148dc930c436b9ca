import pytest

from spinwheel.core.state import (
    EMPTY,
    IMAGE_PENDING,
    FailedResult,
    PayloadKind,
    PhaseMachine,
    RotationState,
    SpinPhase,
    TextResult,
    describe_payload,
)
from spinwheel.wheel.sectors import SectorColor, sector_for


def test_full_spin_cycle():
    machine = PhaseMachine()
    seen = []
    machine.add_listener(lambda old, new: seen.append((old, new)))

    assert machine.transition(SpinPhase.SPINNING)
    assert machine.transition(SpinPhase.RESOLVING)
    assert machine.transition(SpinPhase.SETTLED)
    assert machine.transition(SpinPhase.SPINNING)

    assert seen[0] == (SpinPhase.IDLE, SpinPhase.SPINNING)
    assert seen[-1] == (SpinPhase.SETTLED, SpinPhase.SPINNING)


@pytest.mark.parametrize("start,target", [
    (SpinPhase.IDLE, SpinPhase.SETTLED),
    (SpinPhase.IDLE, SpinPhase.RESOLVING),
    (SpinPhase.SPINNING, SpinPhase.SPINNING),
    (SpinPhase.SPINNING, SpinPhase.SETTLED),
    (SpinPhase.SETTLED, SpinPhase.RESOLVING),
])
def test_invalid_transitions_rejected(start, target):
    machine = PhaseMachine(start)
    assert not machine.can_transition(target)
    assert machine.transition(target) is False
    assert machine.phase is start


def test_spin_allowed_while_resolving():
    machine = PhaseMachine(SpinPhase.RESOLVING)
    assert machine.transition(SpinPhase.SPINNING)


@pytest.mark.parametrize("start", list(SpinPhase))
def test_reset_from_any_phase(start):
    machine = PhaseMachine(start)
    machine.reset()
    assert machine.phase is SpinPhase.IDLE


def test_listener_errors_contained():
    machine = PhaseMachine()

    def broken(old, new):
        raise RuntimeError("listener bug")

    machine.add_listener(broken)
    assert machine.transition(SpinPhase.SPINNING)

    machine.remove_listener(broken)
    machine.remove_listener(broken)  # unknown listener is ignored


def test_rotation_state_is_frozen():
    state = RotationState(270.0)
    assert not state.is_spinning
    with pytest.raises(AttributeError):
        state.start_angle = 10.0


def test_payload_kinds():
    assert EMPTY.kind is PayloadKind.EMPTY
    assert not EMPTY.is_terminal
    assert not IMAGE_PENDING.is_terminal
    assert TextResult("RED").is_terminal
    assert FailedResult("x").is_terminal
    assert EMPTY != IMAGE_PENDING


def test_describe_payload():
    assert describe_payload(TextResult("RED")) == {"kind": "TEXT", "text": "RED"}
    assert describe_payload(FailedResult("HTTP 500")) == {"kind": "FAILED", "reason": "HTTP 500"}
    assert describe_payload(EMPTY) == {"kind": "EMPTY"}


def test_winner_on_snapshot():
    state = RotationState(110.0, SpinPhase.SETTLED, sector_for(SectorColor.GREEN), generation=3)
    assert state.winning_sector.display_text == "GREEN"
    assert state.generation == 3
