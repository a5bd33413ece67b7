from decimal import Decimal

import pytest

from money import Money, SCALE


def test_from_decimal_uses_minor_units():
    assert Money.from_decimal('10.00').units == 10 * SCALE
    assert Money.from_decimal(0.1).units == 1000
    assert Money.from_decimal(Decimal('3.3333')).units == 33333
    assert Money.from_decimal(7).units == 70000


def test_from_decimal_rounds_half_up_to_grid():
    assert Money.from_decimal('0.00005').units == 1
    assert Money.from_decimal('0.00004').units == 0


@pytest.mark.parametrize('value', ['abc', '', 'nan', 'inf', None, True])
def test_from_decimal_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        Money.from_decimal(value)


def test_constructor_requires_integer_units():
    with pytest.raises(TypeError):
        Money(1.5)


def test_arithmetic_is_exact():
    a = Money.from_decimal('0.1')
    b = Money.from_decimal('0.2')
    assert a + b == Money.from_decimal('0.3')
    assert b - a == a
    assert -a == Money(-1000)
    assert abs(Money(-5)) == Money(5)
    assert a * 3 == Money.from_decimal('0.3')
    assert 3 * a == a * 3


def test_division_truncates_toward_zero():
    assert Money.from_decimal('10') / 3 == Money(33333)
    assert Money.from_decimal('-10') / 3 == Money(-33333)
    assert Money.from_decimal('20') / 3 == Money(66666)
    assert Money(10) / Decimal('3') == Money(3)
    assert Money(-7) * Decimal('0.5') == Money(-3)


def test_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        Money(100) / 0


def test_ordering_and_zero_check():
    assert Money(1) > Money.zero()
    assert Money(-1) < Money.zero()
    assert Money(2) >= Money(2)
    assert sorted([Money(3), Money(-1), Money(2)]) == [Money(-1), Money(2), Money(3)]
    assert max(Money(3), Money(5)) == Money(5)
    assert Money.zero().is_zero()
    assert not Money(1).is_zero()


def test_to_decimal_string():
    assert Money(33333).to_decimal_string() == '3.33'
    assert Money(66666).to_decimal_string() == '6.67'
    assert Money(99999).to_decimal_string() == '10.00'
    assert Money(125000).to_decimal_string(0) == '13'
    assert Money(12345).to_decimal_string(4) == '1.2345'
    assert str(Money.from_decimal('42')) == '42.00'


def test_negative_amounts_that_round_to_zero_print_as_zero():
    assert Money(-1).to_decimal_string() == '0.00'
    assert Money(-50000).to_decimal_string() == '-5.00'


def test_hashable():
    assert len({Money(1), Money(1), Money(2)}) == 2


@pytest.mark.parametrize('value', ['1e999999', '-1e999999'])
def test_from_decimal_rejects_amounts_out_of_range(value):
    with pytest.raises(ValueError, match='out of range'):
        Money.from_decimal(value)
