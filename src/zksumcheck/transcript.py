import hashlib
from collections import namedtuple
from typing import List, Optional

from .field import PrimeField
from .polynomial import PolynomialRing

RoundRecord = namedtuple("RoundRecord", ["round_index", "message", "challenge"])


def encode_int(value: int, field: PrimeField) -> bytes:
    return int.to_bytes(value, field.byte_length, "big")


def encode_message(message: PolynomialRing, field: PrimeField) -> bytes:
    """Length-prefixed fixed-width encoding of a round polynomial"""
    coeffs = message.coeffs()
    data = int.to_bytes(len(coeffs), 4, "big")
    for coeff in coeffs:
        data += encode_int(coeff, field)
    return data


class Transcript:
    """
    Append-only record of one sumcheck session: the claimed sum followed by
    every completed round as `(round_index, message, challenge)`.
    """

    def __init__(self, claimed_sum: int, field: PrimeField):
        self.field = field
        self.claimed_sum = field.element(claimed_sum)
        self.__rounds = []

    def __len__(self):
        return len(self.__rounds)

    def __iter__(self):
        return iter(self.__rounds)

    @property
    def rounds(self):
        return tuple(self.__rounds)

    @property
    def messages(self) -> List[PolynomialRing]:
        return [record.message for record in self.__rounds]

    @property
    def challenges(self) -> List[int]:
        return [record.challenge for record in self.__rounds]

    def last_challenge(self) -> Optional[int]:
        if not self.__rounds:
            return None
        return self.__rounds[-1].challenge

    def append_round(self, message: PolynomialRing, challenge: int) -> RoundRecord:
        record = RoundRecord(
            len(self.__rounds) + 1, message, self.field.element(challenge)
        )
        self.__rounds.append(record)
        return record

    def to_bytes(self) -> bytes:
        data = encode_int(self.claimed_sum, self.field)
        for record in self.__rounds:
            data += encode_message(record.message, self.field)
            data += encode_int(record.challenge, self.field)
        return data

    def digest(self, alg="sha256") -> bytes:
        return hashlib.new(alg, self.to_bytes()).digest()
