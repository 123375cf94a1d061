"""Proving side of the sumcheck protocol"""

import logging
from typing import Dict, Sequence, Union

from .polynomial import MultivariatePolynomial, PolynomialRing
from .state import SessionState

logger = logging.getLogger(__name__)


class Prover:
    """
    Honest sumcheck prover.

    Args:
        polynomial: `MultivariatePolynomial` whose hypercube sum is claimed
        overrides: optional `{round_index: message}` emitted instead of the
            computed round polynomial (rounds are numbered from 1). Messages are
            passed through without any validation.
        n_jobs: forwarded to the hypercube summation
    """

    def __init__(
        self,
        polynomial: MultivariatePolynomial,
        overrides: Dict[int, Union[PolynomialRing, Sequence[int]]] = None,
        n_jobs: int = None,
    ):
        self.polynomial = polynomial
        self.n_jobs = n_jobs
        self.overrides = {}
        for round_index, message in (overrides or {}).items():
            self.override(round_index, message)

    def override(self, round_index: int, message: Union[PolynomialRing, Sequence[int]]):
        if not isinstance(message, PolynomialRing):
            message = PolynomialRing(message, self.polynomial.p)
        self.overrides[round_index] = message

    def produce_round(self, state: SessionState) -> PolynomialRing:
        """Round polynomial `g_i` for the round awaited by `state`"""
        round_index = state.next_round

        if round_index in self.overrides:
            logger.debug("Round %d: emitting overridden message", round_index)
            return self.overrides[round_index]

        message = self.polynomial.sum_over_hypercube_fixing_prefix(
            state.challenges, n_jobs=self.n_jobs
        )
        logger.debug("Round %d: g(x) = %s", round_index, message)
        return message
