"""
Fixed-point currency values.

Amounts are held as an integer count of minor units, ten thousand to the
currency unit, so sums of many small shares stay exact and only the final
display is rounded to cents.

Division truncates toward zero onto the minor-unit grid. That is the only
rounding rule applied during arithmetic; display rounding is half-up.
"""
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from functools import total_ordering
from typing import Union

SCALE_DIGITS = 4
SCALE = 10 ** SCALE_DIGITS

Number = Union[int, float, Decimal]


def _truncating_divide(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


@total_ordering
class Money:
    """An exact amount of money in minor units"""

    __slots__ = ('_units',)

    def __init__(self, units: int = 0):
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money expects integer minor units, got {type(units).__name__}")
        self._units = units

    @classmethod
    def from_decimal(cls, value) -> 'Money':
        """Build from a decimal amount such as '12.50', rounding half-up to the grid"""
        try:
            amount = _to_decimal(value) * SCALE
            return cls(int(amount.to_integral_value(rounding=ROUND_HALF_UP)))
        except DecimalException:
            raise ValueError(f"Amount out of range: {value!r}")

    @classmethod
    def zero(cls) -> 'Money':
        return cls(0)

    @property
    def units(self) -> int:
        return self._units

    def is_zero(self) -> bool:
        return self._units == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self._units).scaleb(-SCALE_DIGITS)

    def to_decimal_string(self, places: int = 2) -> str:
        """Render rounded half-up to `places` decimal places"""
        rounded = self.to_decimal().quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        if rounded == 0:
            rounded = abs(rounded)
        return f"{rounded:f}"

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._units + other._units)

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._units - other._units)

    def __neg__(self):
        return Money(-self._units)

    def __abs__(self):
        return Money(abs(self._units))

    def __mul__(self, scalar: Number):
        if isinstance(scalar, bool) or isinstance(scalar, Money):
            return NotImplemented
        if isinstance(scalar, int):
            return Money(self._units * scalar)
        if isinstance(scalar, (float, Decimal)):
            product = Decimal(self._units) * _to_decimal(scalar)
            return Money(int(product.to_integral_value(rounding=ROUND_DOWN)))
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, divisor: Number):
        if isinstance(divisor, bool) or isinstance(divisor, Money):
            return NotImplemented
        if not isinstance(divisor, (int, float, Decimal)):
            return NotImplemented
        if divisor == 0:
            raise ZeroDivisionError("Money division by zero")
        if isinstance(divisor, int):
            return Money(_truncating_divide(self._units, divisor))
        quotient = Decimal(self._units) / _to_decimal(divisor)
        return Money(int(quotient.to_integral_value(rounding=ROUND_DOWN)))

    def __eq__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._units == other._units

    def __lt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._units < other._units

    def __hash__(self):
        return hash(self._units)

    def __repr__(self):
        return f"Money('{self.to_decimal()}')"

    def __str__(self):
        return self.to_decimal_string()
