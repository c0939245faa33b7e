import pytest

from network_status.readiness import ReadinessState, READINESS_EMOJI, ReadinessGate


# ===========================
# TEST GROUP: Readiness Gate
# ===========================
@pytest.mark.parametrize(
    "ready, expected_state",
    [
        # ✅ Host already started
        (True, ReadinessState.READY),

        # ❌ Host still starting
        (False, ReadinessState.NOT_READY),
    ],
)

def test_gate_seeded_from_host(ready, expected_state):
    gate = ReadinessGate(ready)

    assert gate.state is expected_state
    assert gate.is_ready is ready


def test_promote_fires_once():
    """Only the first promotion reports a transition"""
    gate = ReadinessGate()

    assert gate.promote() is True
    assert gate.promote() is False
    assert gate.state is ReadinessState.READY


def test_promote_on_ready_gate_is_noop():
    gate = ReadinessGate(ready=True)

    assert gate.promote() is False
    assert gate.is_ready is True


def test_every_state_has_an_emoji():
    assert set(READINESS_EMOJI) == set(ReadinessState)
    assert str(ReadinessState.NOT_READY) == "NOT_READY"
