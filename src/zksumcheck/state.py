from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import Rejection
from .polynomial import PolynomialRing


class Status(Enum):
    IN_PROGRESS = "in_progress"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Outcome:
    """Verdict of a session; truthy iff the claim was accepted"""

    status: Status
    reason: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.status is Status.ACCEPTED

    @property
    def rejected(self) -> bool:
        return self.status is Status.REJECTED

    def __bool__(self):
        return self.accepted

    def __str__(self):
        if self.reason is None:
            return self.status.value
        return f"{self.status.value} ({self.reason})"


@dataclass
class SessionState:
    """
    Mutable state of one proof session.

    `round_index` counts completed rounds; the awaited round is
    `round_index + 1`. `expected_sum` is the value the next message must sum
    to over `{0, 1}`, or the value the final oracle check must match once all
    rounds are done.
    """

    claimed_sum: int
    expected_sum: int
    round_index: int = 0
    challenges: List[int] = field(default_factory=list)
    status: Status = Status.IN_PROGRESS
    reason: Optional[Rejection] = None

    @property
    def next_round(self) -> int:
        return self.round_index + 1

    def advance(self, message: PolynomialRing, challenge: int):
        self.challenges.append(challenge)
        self.expected_sum = message(challenge)
        self.round_index += 1

    def conclude(self, outcome: Outcome):
        self.status = outcome.status
        self.reason = outcome.reason
