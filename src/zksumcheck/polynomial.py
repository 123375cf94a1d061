import logging
from collections import namedtuple
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from joblib import Parallel, delayed, effective_n_jobs

from .errors import MalformedPolynomial
from .field import PrimeField
from .utils import get_n_jobs, get_parallel_threshold, split_range

logger = logging.getLogger(__name__)


class PolynomialRing:
    def __init__(self, coeffs: Sequence[int], p: int):
        """
        Univariate polynomial over `Z_p`.

        coeffs: List of coefficients, where coeffs[i] is the coefficient of x^i.
        p: Prime number representing the finite field.

        Trailing zero coefficients are kept, so the degree of the polynomial
        is always `len(coeffs) - 1`.
        """
        coeffs = list(coeffs) or [0]
        self.__coeffs = [int(coeff) % p for coeff in coeffs]
        self.p = p

    def coeffs(self) -> List[int]:
        """Return the list of coefficents of the polynomial."""
        return self.__coeffs[:]

    def degree(self) -> int:
        """Return the degree of the polynomial."""
        return len(self.__coeffs) - 1

    def is_zero(self):
        return all(c == 0 for c in self.__coeffs)

    def __bool__(self):
        return not self.is_zero()

    def __eq__(self, other):
        if isinstance(other, PolynomialRing):
            return self.p == other.p and self.__coeffs == other.coeffs()
        return NotImplemented

    def __str__(self):
        if self.is_zero():
            return "0"

        terms = []
        for i, coeff in enumerate(self.__coeffs):
            if coeff == 0:
                continue
            if i == 0:
                terms.append(str(coeff))
            elif i == 1:
                terms.append("x" if coeff == 1 else f"{coeff}*x")
            else:
                terms.append(f"x^{i}" if coeff == 1 else f"{coeff}*x^{i}")

        return " + ".join(terms[::-1])

    def __repr__(self):
        return f"PolynomialRing({self.__coeffs}, {self.p})"

    def __add__(self, other):
        if isinstance(other, int):
            coeffs = self.coeffs()
            coeffs[0] += other
            return PolynomialRing(coeffs, self.p)

        size = max(len(self.__coeffs), len(other.coeffs()))
        a = self.__coeffs + [0] * (size - len(self.__coeffs))
        b = other.coeffs() + [0] * (size - len(other.coeffs()))
        return PolynomialRing([x + y for x, y in zip(a, b)], self.p)

    def __radd__(self, other):
        return self.__add__(other)

    def __neg__(self):
        return PolynomialRing([-c for c in self.__coeffs], self.p)

    def __sub__(self, other):
        return self.__add__(-other)

    def __rsub__(self, other):
        return (-self).__add__(other)

    def __mul__(self, other):
        if isinstance(other, int):
            return PolynomialRing([c * other for c in self.__coeffs], self.p)

        other_coeffs = other.coeffs()
        result = [0] * (len(self.__coeffs) + len(other_coeffs) - 1)
        for i, a in enumerate(self.__coeffs):
            if a == 0:
                continue
            for j, b in enumerate(other_coeffs):
                result[i + j] = (result[i + j] + a * b) % self.p

        return PolynomialRing(result, self.p)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __call__(self, point: int) -> int:
        """Evaluate the polynomial at `point` using Horner's rule"""
        result = 0
        for coeff in reversed(self.__coeffs):
            result = (result * point + coeff) % self.p
        return result


RoundPolynomial = PolynomialRing

Term = namedtuple("Term", ["coefficient", "exponents"])


def _sum_chunk(patterns, start, stop, width, p):
    """
    Sum the suffix patterns over hypercube points `start..stop-1`.

    A point contributes a pattern iff every variable in the pattern's
    support mask is 1 at that point.
    """
    hits = [0] * len(patterns)
    for point in range(start, stop):
        for idx, (mask, _) in enumerate(patterns):
            if point & mask == mask:
                hits[idx] += 1

    acc = [0] * width
    for count, (_, coeffs) in zip(hits, patterns):
        if count == 0:
            continue
        for i, coeff in enumerate(coeffs):
            acc[i] = (acc[i] + count * coeff) % p

    return acc


class MultivariatePolynomial:
    """
    Sparse multivariate polynomial over a prime field.

    Terms are given either as a dictionary, where:
        - Keys are tuples of non-negative integers representing the exponents
          of each variable in a term (e.g., `(2, 1, 0)` for `x^2 * y^1 * z^0`).
        - Values are the coefficients of the corresponding terms.

    or as an iterable of `Term(coefficient, exponents)` pairs.
    Terms with equal exponents are merged and zero coefficients are dropped.
    """

    def __init__(
        self,
        num_vars: int,
        terms: Union[Dict[Tuple[int, ...], int], Iterable[Term]],
        field: PrimeField,
    ):
        if isinstance(num_vars, bool) or not isinstance(num_vars, int) or num_vars < 1:
            raise MalformedPolynomial(
                f"Polynomial must have at least one variable, got {num_vars}"
            )

        self.num_vars = num_vars
        self.field = field

        if isinstance(terms, dict):
            items = [(coeff, exponents) for exponents, coeff in terms.items()]
        else:
            items = [tuple(term) for term in terms]

        merged = {}
        for coeff, exponents in items:
            exponents = self._check_exponents(exponents)
            merged[exponents] = field.add(merged.get(exponents, 0), field.element(coeff))

        self.__terms = tuple(
            Term(coeff, exponents)
            for exponents, coeff in sorted(merged.items())
            if coeff != 0
        )

    def _check_exponents(self, exponents) -> Tuple[int, ...]:
        exponents = tuple(exponents)
        if len(exponents) != self.num_vars:
            raise MalformedPolynomial(
                f"Number of exponents must match the number of variables: "
                f"{len(exponents)} != {self.num_vars}"
            )
        for e in exponents:
            if isinstance(e, bool) or not isinstance(e, int) or e < 0:
                raise MalformedPolynomial(f"Invalid exponent {e!r} in {exponents}")
        return exponents

    @property
    def terms(self) -> Tuple[Term, ...]:
        return self.__terms

    @property
    def p(self) -> int:
        return self.field.p

    def is_zero(self):
        return not self.__terms

    def degree(self, var_index: int) -> int:
        """Maximum exponent of variable `var_index` (0-based) over all terms"""
        if not 0 <= var_index < self.num_vars:
            raise MalformedPolynomial(
                f"Variable index {var_index} out of bounds for {self.num_vars} variables"
            )
        return max((term.exponents[var_index] for term in self.__terms), default=0)

    def degrees(self) -> List[int]:
        return [self.degree(i) for i in range(self.num_vars)]

    def __eq__(self, other):
        if isinstance(other, MultivariatePolynomial):
            return (
                self.num_vars == other.num_vars
                and self.field == other.field
                and self.__terms == other.terms
            )
        return NotImplemented

    def __hash__(self):
        return hash((self.num_vars, self.field.p, self.__terms))

    def __add__(self, other):
        if not isinstance(other, MultivariatePolynomial):
            return NotImplemented
        if self.num_vars != other.num_vars:
            raise MalformedPolynomial(
                "Polynomials must have the same number of variables to be added"
            )
        if self.field != other.field:
            raise MalformedPolynomial(
                "Polynomials must be over the same finite field to be added"
            )
        return MultivariatePolynomial(
            self.num_vars, list(self.__terms) + list(other.terms), self.field
        )

    def __str__(self):
        if self.is_zero():
            return "0"

        terms = []
        for coeff, exponents in self.__terms:
            factors = []
            for i, e in enumerate(exponents):
                if e == 1:
                    factors.append(f"x{i + 1}")
                elif e > 1:
                    factors.append(f"x{i + 1}^{e}")
            if not factors:
                terms.append(str(coeff))
            elif coeff == 1:
                terms.append("*".join(factors))
            else:
                terms.append("*".join([str(coeff)] + factors))

        return " + ".join(terms)

    def __repr__(self):
        terms = {exponents: coeff for coeff, exponents in self.__terms}
        return f"MultivariatePolynomial({self.num_vars}, {terms}, {self.field!r})"

    def evaluate(self, point: Sequence[int]) -> int:
        """Evaluate the polynomial at `point` (one field element per variable)"""
        if len(point) != self.num_vars:
            raise MalformedPolynomial(
                f"Evaluation point must have {self.num_vars} coordinates, got {len(point)}"
            )

        p = self.p
        point = [x % p for x in point]
        result = 0
        for coeff, exponents in self.__terms:
            value = coeff
            for x, e in zip(point, exponents):
                if e == 0:
                    continue
                value = value * pow(x, e, p) % p
                if value == 0:
                    break
            result += value

        return result % p

    def __call__(self, point: Sequence[int]) -> int:
        return self.evaluate(point)

    def partial_evaluate(self, values: Dict[int, int]) -> "MultivariatePolynomial":
        """
        Fix the variables in `values` (`{var_index: value}`) and return a
        polynomial in the remaining variables, keeping their order.
        """
        for index in values:
            if not 0 <= index < self.num_vars:
                raise MalformedPolynomial(
                    f"Variable index {index} out of bounds for {self.num_vars} variables"
                )
        if len(values) >= self.num_vars:
            raise MalformedPolynomial(
                "At least one variable must remain free; use `evaluate` instead"
            )

        p = self.p
        new_terms = []
        for coeff, exponents in self.__terms:
            new_exponents = []
            for index, e in enumerate(exponents):
                if index in values:
                    coeff = coeff * pow(values[index] % p, e, p) % p
                else:
                    new_exponents.append(e)
            new_terms.append(Term(coeff, tuple(new_exponents)))

        return MultivariatePolynomial(
            self.num_vars - len(values), new_terms, self.field
        )

    def _suffix_patterns(self, fixed: List[int], width: int):
        """
        Group terms by the support of their suffix exponents after folding the
        fixed prefix into each coefficient.

        Returns a list of `(mask, coeffs)` where bit `j` of `mask` is set iff
        variable `k + 1 + j` appears in the group, and `coeffs[e]` accumulates
        the scalar of every term whose free variable has exponent `e`.
        """
        k = len(fixed)
        p = self.p
        patterns = {}

        for coeff, exponents in self.__terms:
            scalar = coeff
            for r, e in zip(fixed, exponents[:k]):
                if e:
                    scalar = scalar * pow(r, e, p) % p
                    if scalar == 0:
                        break
            if scalar == 0:
                continue

            mask = 0
            for j, e in enumerate(exponents[k + 1 :]):
                if e:
                    mask |= 1 << j

            coeffs = patterns.setdefault(mask, [0] * width)
            free = exponents[k]
            coeffs[free] = (coeffs[free] + scalar) % p

        return sorted(patterns.items())

    def sum_over_hypercube_fixing_prefix(
        self, fixed: Sequence[int], n_jobs: int = None
    ) -> PolynomialRing:
        """
        Fix the first `len(fixed)` variables to `fixed`, keep the next variable
        free and sum over every Boolean assignment of the remaining ones.

        Returns the univariate polynomial in the free variable, with exactly
        `degree(len(fixed)) + 1` coefficients.

        The hypercube is split into chunks that are summed independently.
        When `n_jobs` is given, or the hypercube holds at least
        `get_parallel_threshold()` points, chunks are dispatched with joblib.
        """
        k = len(fixed)
        if k >= self.num_vars:
            raise MalformedPolynomial(
                f"Cannot fix {k} variables of a {self.num_vars}-variate polynomial "
                "and keep one free"
            )

        p = self.p
        fixed = [int(r) % p for r in fixed]
        width = self.degree(k) + 1
        size = 1 << (self.num_vars - k - 1)
        patterns = self._suffix_patterns(fixed, width)

        if not patterns:
            return PolynomialRing([0] * width, p)

        if n_jobs is None and size >= get_parallel_threshold():
            n_jobs = get_n_jobs()

        if n_jobs is not None and effective_n_jobs(n_jobs) > 1 and size > 1:
            chunks = split_range(size, effective_n_jobs(n_jobs))
            logger.debug(
                "Summing %d hypercube points over %d chunks (%d patterns)",
                size,
                len(chunks),
                len(patterns),
            )
            partials = Parallel(n_jobs=n_jobs)(
                delayed(_sum_chunk)(patterns, start, stop, width, p)
                for start, stop in chunks
            )
        else:
            partials = [_sum_chunk(patterns, 0, size, width, p)]

        coeffs = [sum(column) % p for column in zip(*partials)]
        return PolynomialRing(coeffs, p)

    def hypercube_sum(self) -> int:
        """Sum of the polynomial over every point of `{0,1}^n`"""
        g = self.sum_over_hypercube_fixing_prefix([])
        return self.field.add(g(0), g(1))
