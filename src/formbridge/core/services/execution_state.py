"""Lifecycle states of one execution and the hooks that observe them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


class ExecutionState(str, Enum):
    IDLE = "IDLE"
    SUBSTITUTING = "SUBSTITUTING"
    VALIDATING = "VALIDATING"
    RESOLVING_PREREQUISITES = "RESOLVING_PREREQUISITES"
    DISPATCHING = "DISPATCHING"
    TRANSFORMING_RESPONSE = "TRANSFORMING_RESPONSE"
    DONE = "DONE"
    FAILED = "FAILED"


TERMINAL_STATES = frozenset({ExecutionState.DONE, ExecutionState.FAILED})


@dataclass
class ExecutionHooks:
    """Optional callbacks for UI layers and tests."""

    transition: Callable[[ExecutionState, ExecutionState], None] | None = None


@dataclass
class ExecutionRun:
    """Per-request state tracker; never shared between requests."""

    operation: str
    hooks: ExecutionHooks = field(default_factory=ExecutionHooks)
    state: ExecutionState = ExecutionState.IDLE
    history: list[ExecutionState] = field(default_factory=lambda: [ExecutionState.IDLE])

    def advance(self, state: ExecutionState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Execution already finished in state {self.state.value}")
        previous, self.state = self.state, state
        self.history.append(state)
        logger.debug("execution.state", operation=self.operation, previous=previous.value, state=state.value)
        if self.hooks.transition:
            self.hooks.transition(previous, state)

    def fail(self, error: Exception) -> None:
        logger.warning(
            "execution.failed",
            operation=self.operation,
            stage=self.state.value,
            error=type(error).__name__,
            message=str(error),
        )
        self.advance(ExecutionState.FAILED)
