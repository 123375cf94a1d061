from flint import fmpz

from .errors import DivisionByZero, InvalidModulus
from .utils import get_random_int


class PrimeField:
    """
    Prime field `Z_p`. Field elements are plain integers in `[0, p)`;
    every operation returns a reduced value.

    Args:
        p: prime modulus, rejected with `InvalidModulus` if it is not a prime > 1
    """

    def __init__(self, p: int):
        if isinstance(p, bool) or not isinstance(p, int):
            raise InvalidModulus(f"Modulus must be an integer, got {type(p).__name__}")
        if p <= 1:
            raise InvalidModulus(f"Modulus must be greater than 1, got {p}")
        if not fmpz(p).is_prime():
            raise InvalidModulus(f"Modulus {p} is not prime")

        self.p = p

    def __repr__(self):
        return f"PrimeField({self.p})"

    def __eq__(self, other):
        return isinstance(other, PrimeField) and self.p == other.p

    def __hash__(self):
        return hash(self.p)

    @property
    def byte_length(self) -> int:
        """Number of bytes needed to encode any element"""
        return (self.p.bit_length() + 7) // 8

    def contains(self, value: int) -> bool:
        return 0 <= value < self.p

    def element(self, value: int) -> int:
        return int(value) % self.p

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def random(self, exclude_zero: bool = False) -> int:
        """Sample a uniformly random element from a system entropy source"""
        if exclude_zero:
            return get_random_int(self.p - 1)
        return get_random_int(self.p - 1, 0)

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.p

    def sub(self, a: int, b: int) -> int:
        return (a - b) % self.p

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.p

    def neg(self, a: int) -> int:
        return -a % self.p

    def pow(self, base: int, exp: int) -> int:
        if exp < 0:
            return pow(self.inv(base), -exp, self.p)
        return pow(base, exp, self.p)

    def inv(self, a: int) -> int:
        a %= self.p
        if a == 0:
            raise DivisionByZero(f"Zero has no inverse modulo {self.p}")
        return pow(a, -1, self.p)

    def div(self, a: int, b: int) -> int:
        return self.mul(a, self.inv(b))
