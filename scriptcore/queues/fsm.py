from __future__ import annotations

from enum import StrEnum

from statemachine import State, StateMachine


class QueueState(StrEnum):
    idle = "idle"
    running = "running"
    awaiting_completion = "awaiting_completion"
    drained = "drained"


class QueueFSM(StateMachine):
    """Lifecycle of a script queue.

    - idle: nothing executed yet
    - running: advancing through entries
    - awaiting_completion: the last executed entry is still `wait_for`
    - drained: empty and nothing in flight; new entries reopen it

    The scheduler owns the entries; the FSM only guards transitions.
    """

    idle = State(QueueState.idle.value, value=QueueState.idle.value, initial=True)
    running = State(QueueState.running.value, value=QueueState.running.value)
    awaiting_completion = State(
        QueueState.awaiting_completion.value,
        value=QueueState.awaiting_completion.value,
    )
    drained = State(QueueState.drained.value, value=QueueState.drained.value)

    begin = idle.to(running)
    hold = running.to(awaiting_completion)
    resume = awaiting_completion.to(running)
    reopen = drained.to(running)
    drain = running.to(drained) | idle.to(drained) | awaiting_completion.to(drained)

    @property
    def queue_state(self) -> QueueState:
        return QueueState(str(self.current_state.value))
