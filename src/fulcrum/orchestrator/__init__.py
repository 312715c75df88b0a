"""Pipeline progression for Fulcrum.

Public API:
    ProgressStateMachine: Creates, advances and rejects progress records.
    BulkResult: Per-application outcome of a bulk operation.
    VALID_TRANSITIONS, validate_transition: Progress state rules.
"""

from fulcrum.orchestrator.state_machine import (
    VALID_TRANSITIONS,
    BulkResult,
    ProgressStateMachine,
    validate_transition,
)

__all__ = [
    "ProgressStateMachine",
    "BulkResult",
    "VALID_TRANSITIONS",
    "validate_transition",
]
