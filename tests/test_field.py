import random
import pytest

from zksumcheck import DivisionByZero, InvalidModulus, PrimeField
from zksumcheck.constant import (
    BLS12_381_SCALAR_FIELD,
    BN254_SCALAR_FIELD,
    GOLDILOCKS_FIELD,
)


def test_field_arithmetic():

    field = PrimeField(11)

    assert field.add(7, 5) == 1
    assert field.sub(3, 5) == 9
    assert field.mul(7, 8) == 1
    assert field.neg(0) == 0
    assert field.neg(3) == 8
    assert field.inv(3) == 4
    assert field.div(1, 3) == 4
    assert field.pow(3, -1) == 4
    assert field.pow(2, 10) == 1
    assert field.element(-1) == 10
    assert field.element(25) == 3


def test_field_large_moduli():

    random.seed("field")
    for p in (BN254_SCALAR_FIELD, BLS12_381_SCALAR_FIELD, GOLDILOCKS_FIELD):
        field = PrimeField(p)

        assert field.mul(p - 1, p - 1) == 1
        assert field.add(p - 1, 1) == 0

        for _ in range(10):
            a = random.randrange(1, p)
            assert field.mul(a, field.inv(a)) == 1
            assert field.add(a, field.neg(a)) == 0


def test_field_random_element():

    field = PrimeField(5)
    for _ in range(50):
        assert field.contains(field.random())
        assert field.random(exclude_zero=True) != 0


def test_invert_zero():

    field = PrimeField(97)

    with pytest.raises(DivisionByZero):
        field.inv(0)

    with pytest.raises(ZeroDivisionError):
        field.inv(97)


@pytest.mark.parametrize("modulus", [4, 1, 0, -7, 17617, 2**64])
def test_invalid_modulus(modulus):

    with pytest.raises(InvalidModulus):
        PrimeField(modulus)


def test_non_integer_modulus():

    with pytest.raises(InvalidModulus):
        PrimeField(11.0)

    with pytest.raises(ValueError):
        PrimeField(True)


def test_fields_coexist():

    a = PrimeField(11)
    b = PrimeField(13)

    assert a != b
    assert a == PrimeField(11)
    assert a.add(10, 5) == 4
    assert b.add(10, 5) == 2
    assert a.byte_length == 1
    assert PrimeField(BN254_SCALAR_FIELD).byte_length == 32
