"""
Prove that f(x1, x2, x3) = 2*x1^3*x2 + x1*x3 + x2*x3 sums to the claimed value
over the boolean hypercube {0,1}^3
"""

from zksumcheck import MultivariatePolynomial, PrimeField, Sumcheck, SumcheckSession
from zksumcheck.constant import BN254_SCALAR_FIELD

field = PrimeField(BN254_SCALAR_FIELD)
f = MultivariatePolynomial(3, {(3, 1, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1}, field)

claimed_sum = f.hypercube_sum()
print(f"f = {f}")
print(f"Claimed sum: {claimed_sum}")

# interactive session with random challenges
session = SumcheckSession(f, claimed_sum)
outcome = session.run()
assert outcome
for record in session.transcript:
    print(f"g_{record.round_index}(x) = {record.message}, r_{record.round_index} = {record.challenge}")
print(f"Interactive session: {outcome}")

# non-interactive proof with Fiat-Shamir challenges
sumcheck = Sumcheck(f.num_vars)
claimed_sum, proof, challenges = sumcheck.prove(f)
assert sumcheck.verify(f, claimed_sum, proof)
print("Non-interactive proof is valid")

outcome = sumcheck.verify(f, claimed_sum + 1, proof)
assert not outcome
print(f"Wrong claim is rejected: {outcome.reason}")
