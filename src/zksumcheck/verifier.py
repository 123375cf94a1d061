"""Verification side of the sumcheck protocol"""

import logging
from typing import Dict

from .challenge import ChallengeSource, RandomChallengeSource
from .errors import (
    DegreeViolation,
    FieldMismatch,
    FinalMismatch,
    ProtocolOrderViolation,
    Rejection,
    SumInconsistency,
)
from .polynomial import MultivariatePolynomial, PolynomialRing
from .state import Outcome, SessionState, Status
from .transcript import Transcript

logger = logging.getLogger(__name__)


class Verifier:
    """
    Sumcheck verifier with oracle access to `polynomial`.

    Args:
        polynomial: `MultivariatePolynomial` used for degree bounds and the
            final oracle check
        challenge_source: where challenges come from, `RandomChallengeSource`
            by default
        overrides: optional `{round_index: challenge}` used instead of the
            challenge source for those rounds (rounds are numbered from 1)
    """

    def __init__(
        self,
        polynomial: MultivariatePolynomial,
        challenge_source: ChallengeSource = None,
        overrides: Dict[int, int] = None,
    ):
        self.polynomial = polynomial
        self.field = polynomial.field
        self.challenge_source = challenge_source or RandomChallengeSource()
        self.overrides = {
            round_index: self.field.element(r)
            for round_index, r in (overrides or {}).items()
        }

    def override(self, round_index: int, challenge: int):
        self.overrides[round_index] = self.field.element(challenge)

    def check_round(
        self,
        state: SessionState,
        message: PolynomialRing,
        transcript: Transcript = None,
    ) -> int:
        """
        Check the message for the round awaited by `state` and return the
        challenge `r_i`.

        Raises `FieldMismatch`, `DegreeViolation` or `SumInconsistency` when a
        check fails.
        """
        round_index = state.next_round
        if round_index > self.polynomial.num_vars:
            raise ProtocolOrderViolation(
                f"All {self.polynomial.num_vars} rounds are already complete",
                round_index,
                self.polynomial.num_vars,
                round_index,
            )

        if message.p != self.field.p:
            raise FieldMismatch(round_index, self.field.p, message.p)

        bound = self.polynomial.degree(round_index - 1)
        if message.degree() > bound:
            raise DegreeViolation(round_index, bound, message.degree())

        total = self.field.add(message(0), message(1))
        if total != state.expected_sum:
            raise SumInconsistency(round_index, state.expected_sum, total)

        if round_index in self.overrides:
            challenge = self.overrides[round_index]
        else:
            challenge = self.challenge_source.sample(self.field, transcript, message)

        logger.debug(
            "Round %d: accepted message, r_%d = %d", round_index, round_index, challenge
        )
        return challenge

    def final_check(self, state: SessionState) -> Outcome:
        """Compare the polynomial at the challenges with the last round's claim"""
        n = self.polynomial.num_vars
        if state.round_index != n:
            raise ProtocolOrderViolation(
                f"Final check requires {n} completed rounds, got {state.round_index}",
                state.round_index,
                n,
                state.round_index,
            )

        value = self.polynomial.evaluate(state.challenges)
        if value != state.expected_sum:
            return Outcome(
                Status.REJECTED,
                Rejection.from_error(FinalMismatch(n, state.expected_sum, value)),
            )

        return Outcome(Status.ACCEPTED)
