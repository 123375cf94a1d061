"""
Sumcheck interactive proof protocol over prime fields
"""

from .challenge import (
    ChallengeSource,
    FiatShamirChallengeSource,
    FixedChallengeSource,
    RandomChallengeSource,
)
from .errors import (
    ChallengesExhausted,
    ConstructionError,
    DegreeViolation,
    DivisionByZero,
    FieldMismatch,
    FinalMismatch,
    InvalidModulus,
    MalformedPolynomial,
    ProtocolOrderViolation,
    RejectKind,
    Rejection,
    SessionClosed,
    SoundnessViolation,
    SumcheckError,
    SumInconsistency,
)
from .field import PrimeField
from .polynomial import MultivariatePolynomial, PolynomialRing, RoundPolynomial, Term
from .protocol import Sumcheck, SumcheckSession
from .prover import Prover
from .state import Outcome, SessionState, Status
from .transcript import RoundRecord, Transcript
from .verifier import Verifier
