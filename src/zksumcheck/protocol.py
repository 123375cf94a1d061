import logging
from typing import List, Optional, Sequence, Tuple, Union

from .challenge import FiatShamirChallengeSource
from .errors import (
    ChallengesExhausted,
    ProtocolOrderViolation,
    Rejection,
    SessionClosed,
    SoundnessViolation,
    SumcheckError,
)
from .polynomial import MultivariatePolynomial, PolynomialRing
from .prover import Prover
from .state import Outcome, SessionState, Status
from .transcript import Transcript
from .verifier import Verifier

logger = logging.getLogger(__name__)


class SumcheckSession:
    """
    One interactive sumcheck session between a `Prover` and a `Verifier`.

    The session walks through `Round(1) ... Round(n)` followed by the final
    check. Each round the driver asks for the prover's message with
    `prove_round()` and hands it to `check_round()`, which returns the
    verifier's challenge. `run()` drives the whole exchange.

    A failed verifier check or an out-of-order call ends the session as
    `Rejected`; any further call raises `SessionClosed`.
    """

    def __init__(
        self,
        polynomial: MultivariatePolynomial,
        claimed_sum: int,
        prover: Prover = None,
        verifier: Verifier = None,
    ):
        self.polynomial = polynomial
        self.field = polynomial.field
        self.prover = prover or Prover(polynomial)
        self.verifier = verifier or Verifier(polynomial)

        for party in (self.prover, self.verifier):
            if party.polynomial != polynomial:
                raise ValueError("Prover and verifier must share the session polynomial")

        claimed_sum = self.field.element(claimed_sum)
        self.state = SessionState(claimed_sum=claimed_sum, expected_sum=claimed_sum)
        self.transcript = Transcript(claimed_sum, self.field)

    @property
    def num_rounds(self) -> int:
        return self.polynomial.num_vars

    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def outcome(self) -> Outcome:
        return Outcome(self.state.status, self.state.reason)

    def _ensure_open(self):
        if self.state.status is not Status.IN_PROGRESS:
            raise SessionClosed(
                f"Session already {self.state.status.value}", self.state.round_index
            )

    def _reject(self, exc: SumcheckError) -> Outcome:
        reason = Rejection.from_error(exc)
        logger.warning("Sumcheck rejected: %s", reason)
        self.state.conclude(Outcome(Status.REJECTED, reason))
        return self.outcome

    def prove_round(self) -> Optional[PolynomialRing]:
        """Ask the prover for the message of the awaited round"""
        self._ensure_open()
        if self.state.round_index >= self.num_rounds:
            self._reject(
                ProtocolOrderViolation(
                    f"All {self.num_rounds} rounds are complete, final check is next",
                    self.state.next_round,
                    self.num_rounds,
                    self.state.next_round,
                )
            )
            return None

        return self.prover.produce_round(self.state)

    def check_round(
        self, round_index: int, message: Union[PolynomialRing, Sequence[int]]
    ) -> Optional[int]:
        """
        Submit the prover's `message` for round `round_index` (numbered from 1).

        Returns the verifier's challenge, or `None` if the session was
        rejected; inspect `outcome` for the reason.
        """
        self._ensure_open()

        expected_round = self.state.next_round
        if round_index != expected_round or expected_round > self.num_rounds:
            if expected_round > self.num_rounds:
                awaited = "the final check"
            else:
                awaited = f"round {expected_round}"
            self._reject(
                ProtocolOrderViolation(
                    f"Round {round_index} submitted while awaiting {awaited}",
                    round_index,
                    expected_round,
                    round_index,
                )
            )
            return None

        if not isinstance(message, PolynomialRing):
            message = PolynomialRing(message, self.field.p)

        try:
            challenge = self.verifier.check_round(self.state, message, self.transcript)
        except (SoundnessViolation, ChallengesExhausted) as exc:
            self._reject(exc)
            return None

        self.transcript.append_round(message, challenge)
        self.state.advance(message, challenge)
        return challenge

    def final_check(self) -> Outcome:
        """Run the final oracle check once every round is complete"""
        self._ensure_open()

        if self.state.round_index != self.num_rounds:
            return self._reject(
                ProtocolOrderViolation(
                    f"Final check requested after {self.state.round_index} "
                    f"of {self.num_rounds} rounds",
                    self.state.next_round,
                    self.num_rounds,
                    self.state.round_index,
                )
            )

        outcome = self.verifier.final_check(self.state)
        if outcome.rejected:
            logger.warning("Sumcheck rejected: %s", outcome.reason)
        else:
            logger.info(
                "Sumcheck accepted: sum %d over %d variables",
                self.state.claimed_sum,
                self.num_rounds,
            )
        self.state.conclude(outcome)
        return outcome

    def run(self) -> Outcome:
        """Drive every remaining round and the final check"""
        while self.status is Status.IN_PROGRESS:
            if self.state.round_index == self.num_rounds:
                break
            round_index = self.state.next_round
            self.check_round(round_index, self.prove_round())

        if self.status is Status.IN_PROGRESS:
            self.final_check()

        return self.outcome


class Sumcheck:
    """
    Non-interactive sumcheck: the prover's challenges are derived from the
    transcript (Fiat-Shamir), so a proof is just the list of round polynomials
    and can be checked later by anyone holding the polynomial.
    """

    def __init__(self, n: int, label: bytes = b"sumcheck", alg="sha256"):
        self.n = n
        self.label = label
        self.alg = alg

    def _verifier(self, polynomial):
        return Verifier(polynomial, FiatShamirChallengeSource(self.label, self.alg))

    def prove(
        self, polynomial: MultivariatePolynomial, claimed_sum: int = None
    ) -> Tuple[int, List[PolynomialRing], List[int]]:
        """
        Prove the hypercube sum of `polynomial`.

        Return `(claimed_sum, proof, challenges)` where `proof` holds one round
        polynomial per variable.
        """
        assert polynomial.num_vars == self.n

        if claimed_sum is None:
            claimed_sum = polynomial.hypercube_sum()

        session = SumcheckSession(
            polynomial, claimed_sum, verifier=self._verifier(polynomial)
        )
        outcome = session.run()
        if not outcome:
            raise ValueError(f"Failed to prove sum {claimed_sum}: {outcome.reason}")

        state = session.state
        return state.claimed_sum, session.transcript.messages, state.challenges

    def verify(
        self,
        polynomial: MultivariatePolynomial,
        claimed_sum: int,
        proof: Sequence[Union[PolynomialRing, Sequence[int]]],
    ) -> Outcome:
        """
        Verify `proof` for `claimed_sum`. The returned `Outcome` is truthy
        iff the proof is accepted.
        """
        assert polynomial.num_vars == self.n

        if len(proof) != self.n:
            raise ValueError(
                f"Proof must contain {self.n} round polynomials, got {len(proof)}"
            )

        prover = Prover(polynomial, dict(enumerate(proof, start=1)))
        session = SumcheckSession(
            polynomial, claimed_sum, prover=prover, verifier=self._verifier(polynomial)
        )
        return session.run()
