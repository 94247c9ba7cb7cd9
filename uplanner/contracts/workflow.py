"""Derived workflow state and transition gate decisions (never persisted)."""

from pydantic import BaseModel, ConfigDict

from uplanner.contracts.enums import GateVerdict, TransitionKind, WorkflowStep


class WorkflowState(BaseModel):
    """Step, completed steps and lock flag computed from a plan snapshot."""

    model_config = ConfigDict(use_enum_values=True)

    current_step: WorkflowStep
    completed_steps: list[WorkflowStep]
    schedule_locked: bool


class GateDecision(BaseModel):
    """Outcome of asking the transition gate whether an action may run."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    transition: TransitionKind
    verdict: GateVerdict
    reason: str | None = None
    prompt: str | None = None

    @property
    def may_proceed(self) -> bool:
        return self.verdict == GateVerdict.PROCEED

    @classmethod
    def rejected(cls, transition: TransitionKind, reason: str) -> "GateDecision":
        return cls(
            transition=transition,
            verdict=GateVerdict.REJECTED_PRECONDITION,
            reason=reason,
        )

    @classmethod
    def needs_confirmation(cls, transition: TransitionKind, prompt: str) -> "GateDecision":
        return cls(
            transition=transition,
            verdict=GateVerdict.NEEDS_CONFIRMATION,
            prompt=prompt,
        )

    @classmethod
    def proceed(cls, transition: TransitionKind) -> "GateDecision":
        return cls(transition=transition, verdict=GateVerdict.PROCEED)
