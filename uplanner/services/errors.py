"""Service-level exceptions.

Orchestration services convert these into ``Outcome`` values at their
boundary; only the API layer and tests see them raised.
"""


class UplannerError(Exception):
    """Base exception for workflow service errors."""


class VolumeGenerationError(UplannerError):
    """The volume generator could not produce operation volumes."""


class OperationInFlightError(UplannerError):
    """The same operation is already running for this identifier."""

    def __init__(self, kind: str, op_id: str):
        self.kind = kind
        self.op_id = op_id
        super().__init__(f"{kind} already in progress for {op_id}")


class InvalidCallbackError(UplannerError):
    """A FAS callback could not be applied to its flight plan."""
