import random
import sys

from zksumcheck import MultivariatePolynomial, PrimeField, SumcheckSession
from zksumcheck.constant import BN254_SCALAR_FIELD
from zksumcheck.utils import Timer


def random_polynomial(n, field, num_terms, max_degree=2):
    terms = {}
    for _ in range(num_terms):
        exponents = tuple(random.randint(0, max_degree) for _ in range(n))
        terms[exponents] = random.randrange(field.p)
    return MultivariatePolynomial(n, terms, field)


def run(n, num_terms, n_jobs=None):
    field = PrimeField(BN254_SCALAR_FIELD)
    poly = random_polynomial(n, field, num_terms)

    with Timer(f"n={n} terms={num_terms} hypercube sum"):
        claimed_sum = poly.hypercube_sum()

    session = SumcheckSession(poly, claimed_sum)
    session.prover.n_jobs = n_jobs
    with Timer(f"n={n} terms={num_terms} session (n_jobs={n_jobs})"):
        outcome = session.run()

    assert outcome


if __name__ == "__main__":
    random.seed("benchmark")
    max_vars = int(sys.argv[1]) if len(sys.argv) > 1 else 16
    for n in range(8, max_vars + 1, 4):
        run(n, 32, n_jobs=1)
        run(n, 32)
