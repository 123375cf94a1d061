"""
Sources of verifier challenges.

The verifier never samples randomness directly; it asks a `ChallengeSource`.
Sessions use `RandomChallengeSource` by default, tests inject
`FixedChallengeSource`, and non-interactive proofs derive challenges from the
transcript with `FiatShamirChallengeSource`.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Iterable

from .errors import ChallengesExhausted
from .field import PrimeField
from .polynomial import PolynomialRing
from .transcript import Transcript, encode_message


class ChallengeSource(ABC):

    @abstractmethod
    def sample(
        self,
        field: PrimeField,
        transcript: Transcript = None,
        message: PolynomialRing = None,
    ) -> int:
        """Return the challenge for the round whose `message` was just accepted"""
        raise NotImplementedError()


class RandomChallengeSource(ChallengeSource):
    """Uniform challenges from the operating system's entropy source"""

    def sample(self, field, transcript=None, message=None):
        return field.random()


class FixedChallengeSource(ChallengeSource):
    """Replay a predetermined sequence of challenges"""

    def __init__(self, challenges: Iterable[int]):
        self.challenges = list(challenges)
        self.position = 0

    def sample(self, field, transcript=None, message=None):
        if self.position >= len(self.challenges):
            raise ChallengesExhausted(
                f"Fixed challenge sequence exhausted after {len(self.challenges)} values",
                self.position + 1,
                len(self.challenges),
                self.position + 1,
            )
        challenge = field.element(self.challenges[self.position])
        self.position += 1
        return challenge


class FiatShamirChallengeSource(ChallengeSource):
    """
    Derive each challenge by hashing the transcript so far together with the
    message being answered.
    """

    def __init__(self, label: bytes = b"sumcheck", alg="sha256"):
        self.label = label
        self.alg = alg

    def sample(self, field, transcript=None, message=None):
        if transcript is None:
            raise ValueError("Fiat-Shamir challenges require a transcript")

        hasher = hashlib.new(self.alg, self.label)
        hasher.update(transcript.to_bytes())
        if message is not None:
            hasher.update(encode_message(message, field))

        return int.from_bytes(hasher.digest(), "big") % field.p
