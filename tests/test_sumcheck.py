import itertools
import logging
import random
import pytest

from zksumcheck import (
    FixedChallengeSource,
    InvalidModulus,
    MultivariatePolynomial,
    PolynomialRing,
    PrimeField,
    Prover,
    RejectKind,
    Rejection,
    SessionClosed,
    Status,
    Sumcheck,
    SumcheckSession,
    Verifier,
)
from zksumcheck.constant import BLS12_381_SCALAR_FIELD, BN254_SCALAR_FIELD


def true_sum(poly):
    """Sum of `poly` over the Boolean hypercube by direct evaluation"""
    points = itertools.product([0, 1], repeat=poly.num_vars)
    return sum(poly.evaluate(list(point)) for point in points) % poly.p


def random_polynomial(n, field, num_terms=6, max_degree=3):
    terms = {}
    for _ in range(num_terms):
        exponents = tuple(random.randint(0, max_degree) for _ in range(n))
        terms[exponents] = random.randrange(field.p)
    return MultivariatePolynomial(n, terms, field)


@pytest.fixture
def example_poly():
    # x1*x2 + x1 over F_11
    return MultivariatePolynomial(2, {(1, 1): 1, (1, 0): 1}, PrimeField(11))


def fixed_verifier(poly, challenges):
    return Verifier(poly, FixedChallengeSource(challenges))


def test_example_scenario(example_poly):

    claimed_sum = true_sum(example_poly)
    assert claimed_sum == 3

    session = SumcheckSession(
        example_poly, claimed_sum, verifier=fixed_verifier(example_poly, [4, 7])
    )
    outcome = session.run()

    assert outcome.accepted
    assert outcome.reason is None
    assert session.transcript.messages == [
        PolynomialRing([0, 3], 11),
        PolynomialRing([4, 4], 11),
    ]
    assert session.transcript.challenges == [4, 7]
    assert session.state.expected_sum == example_poly.evaluate([4, 7]) == 10


def test_completeness():

    random.seed("completeness")
    for p in (97, BN254_SCALAR_FIELD, BLS12_381_SCALAR_FIELD):
        field = PrimeField(p)
        for n in range(1, 6):
            poly = random_polynomial(n, field)
            session = SumcheckSession(poly, true_sum(poly))

            assert session.run()
            assert session.status is Status.ACCEPTED
            assert len(session.transcript) == n


def test_zero_polynomial():

    poly = MultivariatePolynomial(3, {}, PrimeField(13))

    assert SumcheckSession(poly, 0).run()
    assert not SumcheckSession(MultivariatePolynomial(3, {}, PrimeField(13)), 1).run()


def test_wrong_claimed_sum(example_poly):

    session = SumcheckSession(example_poly, 4)
    outcome = session.run()

    assert outcome.rejected
    assert outcome.reason.kind is RejectKind.SUM_INCONSISTENCY
    assert outcome.reason.round_index == 1
    assert outcome.reason.expected == 4
    assert outcome.reason.actual == 3
    assert len(session.transcript) == 0


def test_wrong_claimed_sum_random():

    random.seed("soundness")
    field = PrimeField(BN254_SCALAR_FIELD)
    for n in range(1, 5):
        poly = random_polynomial(n, field)
        outcome = SumcheckSession(poly, true_sum(poly) + 1).run()

        assert outcome.reason.kind is RejectKind.SUM_INCONSISTENCY
        assert outcome.reason.round_index == 1


def test_degree_violation(example_poly):

    # numerically consistent with the claim, but padded above the degree bound
    prover = Prover(example_poly, overrides={1: [0, 3, 0]})
    outcome = SumcheckSession(example_poly, 3, prover=prover).run()

    assert outcome.reason.kind is RejectKind.DEGREE_VIOLATION
    assert outcome.reason.round_index == 1
    assert outcome.reason.expected == 1
    assert outcome.reason.actual == 2


def test_degree_violation_later_round(example_poly):

    prover = Prover(example_poly)
    prover.override(2, PolynomialRing([4, 4, 0], 11))
    session = SumcheckSession(
        example_poly, 3, prover=prover, verifier=fixed_verifier(example_poly, [4, 7])
    )
    outcome = session.run()

    assert outcome.reason.kind is RejectKind.DEGREE_VIOLATION
    assert outcome.reason.round_index == 2
    assert session.transcript.challenges == [4]


def test_cheating_prover_caught_next_round(example_poly):

    # g1(0) + g1(1) = 1 + 4 = 5 matches the false claim
    prover = Prover(example_poly, overrides={1: [1, 3]})
    session = SumcheckSession(
        example_poly, 5, prover=prover, verifier=fixed_verifier(example_poly, [4, 7])
    )
    outcome = session.run()

    assert outcome.reason.kind is RejectKind.SUM_INCONSISTENCY
    assert outcome.reason.round_index == 2
    # g1(4) = 13 = 2, while the honest g2 = 4*x + 4 sums to 12 = 1
    assert outcome.reason.expected == 2
    assert outcome.reason.actual == 1


def test_final_mismatch():

    field = PrimeField(11)
    poly = MultivariatePolynomial(1, {(1,): 1}, field)

    # 1 + 10*x sums to 1 over {0, 1} like the honest x, but differs at r = 3
    prover = Prover(poly, overrides={1: [1, 10]})
    outcome = SumcheckSession(
        poly, 1, prover=prover, verifier=fixed_verifier(poly, [3])
    ).run()

    assert outcome.reason.kind is RejectKind.FINAL_MISMATCH
    assert outcome.reason.round_index == 1
    assert outcome.reason.expected == 9
    assert outcome.reason.actual == 3


def test_message_over_another_field():

    field = PrimeField(11)
    poly = MultivariatePolynomial(1, {(1,): 1}, field)

    # 12*x over Z_23 sums to 12, which would pass as the claim 1 once reduced mod 11
    prover = Prover(poly, overrides={1: PolynomialRing([0, 12], 23)})
    session = SumcheckSession(
        poly, 1, prover=prover, verifier=fixed_verifier(poly, [3])
    )
    outcome = session.run()

    assert outcome.reason.kind is RejectKind.FIELD_MISMATCH
    assert outcome.reason.round_index == 1
    assert outcome.reason.expected == 11
    assert outcome.reason.actual == 23
    assert session.state.expected_sum == 1
    assert len(session.transcript) == 0


def test_challenges_exhausted(example_poly):

    session = SumcheckSession(
        example_poly, 3, verifier=fixed_verifier(example_poly, [4])
    )
    outcome = session.run()

    assert outcome.rejected
    assert outcome.reason.kind is RejectKind.PROTOCOL_ORDER_VIOLATION
    assert outcome.reason.round_index == 2
    assert session.status is Status.REJECTED
    assert session.transcript.challenges == [4]

    with pytest.raises(SessionClosed):
        session.prove_round()


def test_check_round_twice(example_poly):

    session = SumcheckSession(example_poly, 3)
    message = session.prove_round()

    assert session.check_round(1, message) is not None
    assert session.check_round(1, message) is None

    outcome = session.outcome
    assert outcome.reason.kind is RejectKind.PROTOCOL_ORDER_VIOLATION
    assert outcome.reason.expected == 2
    assert outcome.reason.actual == 1

    with pytest.raises(SessionClosed):
        session.prove_round()

    with pytest.raises(SessionClosed):
        session.final_check()

    # the recorded reason survives further misuse
    assert session.outcome == outcome


def test_skip_round(example_poly):

    session = SumcheckSession(example_poly, 3)

    assert session.check_round(2, [4, 4]) is None
    assert session.outcome.reason.kind is RejectKind.PROTOCOL_ORDER_VIOLATION


def test_final_check_too_early(example_poly):

    session = SumcheckSession(example_poly, 3)
    session.check_round(1, session.prove_round())
    outcome = session.final_check()

    assert outcome.rejected
    assert outcome.reason.kind is RejectKind.PROTOCOL_ORDER_VIOLATION
    assert outcome.reason.actual == 1


def test_rounds_after_completion(example_poly):

    session = SumcheckSession(example_poly, 3)
    for round_index in (1, 2):
        session.check_round(round_index, session.prove_round())

    assert session.prove_round() is None
    assert session.outcome.reason.kind is RejectKind.PROTOCOL_ORDER_VIOLATION

    session = SumcheckSession(example_poly, 3)
    for round_index in (1, 2):
        session.check_round(round_index, session.prove_round())

    assert session.check_round(3, [0]) is None
    assert session.outcome.reason.kind is RejectKind.PROTOCOL_ORDER_VIOLATION


def test_step_by_step(example_poly):

    verifier = Verifier(example_poly, overrides={1: 4, 2: 7})
    session = SumcheckSession(example_poly, 3, verifier=verifier)

    assert session.check_round(1, session.prove_round()) == 4
    assert session.state.expected_sum == 1
    assert session.transcript.last_challenge() == 4
    assert session.check_round(2, session.prove_round()) == 7
    assert session.status is Status.IN_PROGRESS

    assert session.final_check()
    assert session.status is Status.ACCEPTED


def test_deterministic_transcript():

    random.seed("transcript")
    field = PrimeField(BN254_SCALAR_FIELD)
    poly = random_polynomial(4, field)
    challenges = [random.randrange(field.p) for _ in range(4)]

    transcripts = []
    for _ in range(2):
        session = SumcheckSession(
            poly, true_sum(poly), verifier=fixed_verifier(poly, challenges)
        )
        assert session.run()
        transcripts.append(session.transcript)

    assert transcripts[0].to_bytes() == transcripts[1].to_bytes()
    assert transcripts[0].digest() == transcripts[1].digest()


def test_session_requires_same_polynomial(example_poly):

    other = MultivariatePolynomial(2, {(1, 1): 1}, PrimeField(11))

    with pytest.raises(ValueError):
        SumcheckSession(example_poly, 3, prover=Prover(other))


def test_rejection_logged(example_poly, caplog):

    with caplog.at_level(logging.WARNING, logger="zksumcheck"):
        SumcheckSession(example_poly, 4).run()

    assert "sum_inconsistency" in caplog.text


def test_construction_error_reason():

    with pytest.raises(InvalidModulus) as exc_info:
        PrimeField(4)

    reason = Rejection.from_error(exc_info.value)
    assert reason.kind is RejectKind.INVALID_MODULUS


def test_non_interactive_sumcheck():

    random.seed("fiat-shamir")
    field = PrimeField(BN254_SCALAR_FIELD)
    poly = random_polynomial(4, field, num_terms=8)

    sumcheck = Sumcheck(poly.num_vars)
    claimed_sum, proof, challenges = sumcheck.prove(poly)

    assert claimed_sum == true_sum(poly)
    assert len(proof) == len(challenges) == 4
    assert sumcheck.verify(poly, claimed_sum, proof)

    # a different domain label derives different challenges
    _, _, other_challenges = Sumcheck(poly.num_vars, label=b"other").prove(poly)
    assert other_challenges != challenges


def test_non_interactive_tampered_proof():

    random.seed("fiat-shamir-tamper")
    field = PrimeField(BN254_SCALAR_FIELD)
    poly = random_polynomial(3, field, num_terms=8)

    sumcheck = Sumcheck(poly.num_vars)
    claimed_sum, proof, _ = sumcheck.prove(poly)

    outcome = sumcheck.verify(poly, claimed_sum + 1, proof)
    assert outcome.reason.kind is RejectKind.SUM_INCONSISTENCY
    assert outcome.reason.round_index == 1

    tampered = list(proof)
    tampered[1] = tampered[1] + 1
    outcome = sumcheck.verify(poly, claimed_sum, tampered)
    assert outcome.reason.kind is RejectKind.SUM_INCONSISTENCY
    assert outcome.reason.round_index == 2

    foreign = list(proof)
    foreign[0] = PolynomialRing(foreign[0].coeffs(), 101)
    outcome = sumcheck.verify(poly, claimed_sum, foreign)
    assert outcome.reason.kind is RejectKind.FIELD_MISMATCH
    assert outcome.reason.round_index == 1

    with pytest.raises(ValueError):
        sumcheck.verify(poly, claimed_sum, proof[:-1])

    with pytest.raises(ValueError):
        sumcheck.prove(poly, claimed_sum + 1)
