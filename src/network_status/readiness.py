# --- Standard library imports ---
from enum import Enum, auto


class ReadinessState(Enum):
    """
    Host readiness as seen by the connectivity watcher.

    • NOT_READY: host still starting; connectivity reported as offline
    • READY:     host finished startup; connectivity reported as observed

    Invariants:
    • The only transition is NOT_READY → READY
    • READY is terminal
    """
    NOT_READY = auto()
    READY = auto()

    def __str__(self) -> str:
        return self.name

READINESS_EMOJI = {
    ReadinessState.NOT_READY: "🔴",
    ReadinessState.READY:     "💚",
}

class ReadinessGate:
    """
    One-shot readiness gate.

    • Seeded from the host's synchronous readiness check
    • Promoted at most once, no matter how often the host signals
    """

    def __init__(self, ready: bool = False):
        self.state: ReadinessState = (
            ReadinessState.READY if ready else ReadinessState.NOT_READY
        )

    @property
    def is_ready(self) -> bool:
        return self.state is ReadinessState.READY

    def promote(self) -> bool:
        """
        Move NOT_READY → READY.

        Returns:
            True only for the call that performed the transition.
        """
        match self.state:
            case ReadinessState.NOT_READY:
                self.state = ReadinessState.READY
                return True

            case _:
                return False  # READY stays READY
