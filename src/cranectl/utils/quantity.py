"""
Kubernetes resource quantities ("500m", "256Mi", "1e3") with exact decimal
arithmetic and the canonical string form used by kubectl.
"""

import re
from decimal import ROUND_CEILING, Decimal, DecimalException
from enum import Enum
from typing import Union

_NUMBER_RE = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+))(.*)$")
_EXPONENT_RE = re.compile(r"^[eE]([+-]?\d+)$")

_BINARY_SUFFIXES = ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei"]
_DECIMAL_EXPONENTS = {
    "n": -9,
    "u": -6,
    "m": -3,
    "": 0,
    "k": 3,
    "M": 6,
    "G": 9,
    "T": 12,
    "P": 15,
    "E": 18,
}
_DECIMAL_SUFFIXES = {exponent: suffix for suffix, exponent in _DECIMAL_EXPONENTS.items()}

# Quantities are never more precise than one nano unit
_NANO = Decimal("1e-9")
# Nothing a cluster accepts comes close to 10^27 units
_MAX_MAGNITUDE = 27


class QuantityFormat(str, Enum):
    DECIMAL_SI = "DecimalSI"
    BINARY_SI = "BinarySI"
    DECIMAL_EXPONENT = "DecimalExponent"


class Quantity:
    """
    An exact resource amount plus the notation it should be printed in.

    Arithmetic keeps the format of the left operand, so a memory request
    written as "128Mi" minus "256Mi" prints as "-128Mi".
    """

    __slots__ = ("value", "format")

    def __init__(self, value: Union[int, str, Decimal] = 0, fmt: QuantityFormat = QuantityFormat.DECIMAL_SI):
        self.value = Decimal(value)
        self.format = fmt

    @classmethod
    def parse(cls, quantity: Union[str, int, float, Decimal]) -> "Quantity":
        """
        Parses a quantity string.

        Raises:
            ValueError: if the text is not a valid quantity.
        """
        if isinstance(quantity, bool) or quantity is None:
            raise ValueError(f"invalid quantity: {quantity!r}")
        if isinstance(quantity, (int, float, Decimal)):
            # YAML numbers such as "memory: 1024" are plain decimal amounts
            return cls(cls.parse(str(quantity)).value, QuantityFormat.DECIMAL_SI)

        text = str(quantity).strip()
        match = _NUMBER_RE.match(text)
        if not match:
            raise ValueError(f"invalid quantity: {quantity!r}")
        number, suffix = match.group(1), match.group(2)
        try:
            value = Decimal(number)
            if suffix in _BINARY_SUFFIXES and suffix:
                value, fmt = value * 1024 ** _BINARY_SUFFIXES.index(suffix), QuantityFormat.BINARY_SI
            elif suffix in _DECIMAL_EXPONENTS:
                value, fmt = value.scaleb(_DECIMAL_EXPONENTS[suffix]), QuantityFormat.DECIMAL_SI
            else:
                exponent = _EXPONENT_RE.match(suffix)
                if not exponent:
                    raise ValueError(f"invalid quantity suffix {suffix!r} in {quantity!r}")
                value, fmt = value.scaleb(int(exponent.group(1))), QuantityFormat.DECIMAL_EXPONENT
            if value.as_tuple().exponent < -9:
                value = value.quantize(_NANO, rounding=ROUND_CEILING)
        except DecimalException as e:
            raise ValueError(f"invalid quantity: {quantity!r}") from e

        if value and value.adjusted() > _MAX_MAGNITUDE:
            raise ValueError(f"quantity {quantity!r} is too large")
        return cls(value, fmt)

    @classmethod
    def zero(cls, fmt: QuantityFormat = QuantityFormat.DECIMAL_SI) -> "Quantity":
        return cls(0, fmt)

    def is_zero(self) -> bool:
        return self.value == 0

    def __add__(self, other: "Quantity") -> "Quantity":
        return Quantity(self.value + other.value, self.format)

    def __sub__(self, other: "Quantity") -> "Quantity":
        return Quantity(self.value - other.value, self.format)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def __repr__(self) -> str:
        return f"Quantity({str(self)!r})"

    def __str__(self) -> str:
        fmt = self.format
        if fmt == QuantityFormat.BINARY_SI:
            # Small or fractional amounts read better in decimal notation
            if -1024 < self.value < 1024 or self.value != self.value.to_integral_value():
                fmt = QuantityFormat.DECIMAL_SI
        if fmt == QuantityFormat.BINARY_SI:
            return _format_binary(int(self.value))

        mantissa, exponent = _decimal_parts(self.value)
        if mantissa == 0:
            return "0"
        if fmt == QuantityFormat.DECIMAL_EXPONENT:
            return f"{mantissa}e{exponent}" if exponent else str(mantissa)
        return f"{mantissa}{_DECIMAL_SUFFIXES[exponent]}"


def _format_binary(amount: int) -> str:
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    power = 0
    while amount and amount % 1024 == 0 and power < len(_BINARY_SUFFIXES) - 1:
        amount //= 1024
        power += 1
    return f"{sign}{amount}{_BINARY_SUFFIXES[power]}"


def _decimal_parts(value: Decimal):
    """
    Splits a value into an integer mantissa and an exponent that is a
    multiple of three between -9 and 18.
    """
    if value == 0:
        return 0, 0
    if value.as_tuple().exponent < -9:
        value = value.quantize(_NANO, rounding=ROUND_CEILING)
    sign, digits, exponent = value.normalize().as_tuple()
    mantissa = int("".join(str(d) for d in digits))
    if sign:
        mantissa = -mantissa

    scaled = exponent - (exponent % 3)
    mantissa *= 10 ** (exponent - scaled)
    if scaled > 18:
        mantissa *= 10 ** (scaled - 18)
        scaled = 18
    return mantissa, scaled
