"""
Drive a session round by round against provers that lie about the sum
"""

from zksumcheck import (
    FixedChallengeSource,
    MultivariatePolynomial,
    PrimeField,
    Prover,
    SumcheckSession,
    Verifier,
)

field = PrimeField(11)
# x1*x2 + x1, its true sum over {0,1}^2 is 3
f = MultivariatePolynomial(2, {(1, 1): 1, (1, 0): 1}, field)

# honest prover, driven step by step with fixed challenges
verifier = Verifier(f, FixedChallengeSource([4, 7]))
session = SumcheckSession(f, 3, verifier=verifier)
for round_index in range(1, f.num_vars + 1):
    message = session.prove_round()
    challenge = session.check_round(round_index, message)
    print(f"round {round_index}: g = {message}, r = {challenge}")
outcome = session.final_check()
assert outcome
print(f"Honest prover: {outcome}")

# false claim, first message crafted so that g1(0) + g1(1) matches it
prover = Prover(f, overrides={1: [1, 3]})
verifier = Verifier(f, FixedChallengeSource([4, 7]))
outcome = SumcheckSession(f, 5, prover=prover, verifier=verifier).run()
assert not outcome
print(f"Lying prover: {outcome}")

# message above the degree bound of x1
prover = Prover(f, overrides={1: [0, 3, 0]})
outcome = SumcheckSession(f, 3, prover=prover).run()
assert not outcome
print(f"Oversized message: {outcome}")
