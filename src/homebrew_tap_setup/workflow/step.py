from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from .context import RunContext


class VerifyStatus(str, Enum):
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class Step(Protocol):
    """A single idempotent, verifiable unit of provisioning work.

    Contract:
      - `preflight` validates preconditions and must not produce side effects.
      - `apply` performs the effect and may run external commands.
      - `verify` is side-effect free and repeatable. Returning INCOMPLETE is a
        normal result; raising means the check itself could not run.
      - `undo` is a compensation hook. The runner never calls it.

    Steps communicate through scratch fields on `context.state`; a step that
    writes one calls `context.persist()` itself.
    """

    step_id: ClassVar[str]
    description: ClassVar[str]

    def preflight(self, context: RunContext) -> None: ...

    def apply(self, context: RunContext) -> None: ...

    def verify(self, context: RunContext) -> VerifyStatus: ...

    def undo(self, context: RunContext) -> None:
        return None
