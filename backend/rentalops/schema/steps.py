"""Tagged results for individual migration steps."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# Module-level attribute a revision script sets to declare that its downgrade
# cannot undo the upgrade. The value is the human-readable reason.
IRREVERSIBLE_ATTR = "IRREVERSIBLE_DOWNGRADE"


class StepDirection(str, Enum):
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"


class StepKind(str, Enum):
    REVERSIBLE = "reversible"
    IRREVERSIBLE = "irreversible"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one applied step."""

    revision: str
    direction: StepDirection
    kind: StepKind = StepKind.REVERSIBLE
    reason: str | None = None
    description: str | None = None

    @property
    def reversible(self) -> bool:
        return self.kind is StepKind.REVERSIBLE

    def __str__(self) -> str:
        text = f"{self.direction.value} {self.revision}"
        if self.description:
            text += f" ({self.description})"
        if not self.reversible:
            text += f" [irreversible: {self.reason}]"
        return text


def irreversible(reason: str) -> None:
    """Called from a downgrade that cannot undo its upgrade.

    Logs a warning and returns; the structural change stays in place and the
    version pointer still retreats.
    """
    logger.warning("Irreversible downgrade, manual intervention may be required: %s", reason)


def result_for(revision: str, direction: StepDirection, module: object | None, description: str | None) -> StepResult:
    """Build the result for a step from its revision module's declarations."""
    reason = getattr(module, IRREVERSIBLE_ATTR, None) if module is not None else None
    if reason:
        return StepResult(
            revision=revision,
            direction=direction,
            kind=StepKind.IRREVERSIBLE,
            reason=reason,
            description=description,
        )
    return StepResult(revision=revision, direction=direction, description=description)
