from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import NamedTuple
from app.core.errors import CurrencyMismatchError, InvalidAmountError

# ISO 4217 currencies whose minor unit is not cents
ZERO_DECIMAL = {
    "BIF", "CLP", "DJF", "GNF", "ISK", "JPY", "KMF", "KRW", "PYG",
    "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF",
}
THREE_DECIMAL = {"BHD", "IQD", "JOD", "KWD", "LYD", "OMR", "TND"}

# largest amount a signed 64-bit column holds
MAX_MINOR_UNITS = 2**63 - 1


def normalize_currency(code: str) -> str:
    code = (code or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise InvalidAmountError(f"Invalid currency code: {code!r}")
    return code


def minor_unit_exponent(currency: str) -> int:
    currency = normalize_currency(currency)
    if currency in ZERO_DECIMAL:
        return 0
    if currency in THREE_DECIMAL:
        return 3
    return 2


class Money(NamedTuple):
    """An integer count of minor units in one currency."""

    amount: int
    currency: str

    @classmethod
    def parse(cls, value, currency: str) -> "Money":
        """Convert a major-unit decimal ("10.01") into minor units.

        Values carrying more precision than the currency allows are rejected
        instead of rounded.
        """
        currency = normalize_currency(currency)
        exponent = minor_unit_exponent(currency)
        try:
            d = Decimal(str(value))
        except InvalidOperation:
            raise InvalidAmountError(f"Invalid amount: {value!r}")

        if not d.is_finite():
            raise InvalidAmountError(f"Invalid amount: {value!r}")

        scaled = d.scaleb(exponent)
        if abs(scaled) > MAX_MINOR_UNITS:
            raise InvalidAmountError(f"Amount {value} {currency} is too large")

        if scaled != scaled.to_integral_value():
            raise InvalidAmountError(
                f"{value} has more than {exponent} decimal places for {currency}"
            )
        return cls(int(scaled), currency)

    def to_decimal(self) -> Decimal:
        exponent = minor_unit_exponent(self.currency)
        quantum = Decimal(1).scaleb(-exponent)
        return Decimal(self.amount).scaleb(-exponent).quantize(quantum, rounding=ROUND_HALF_UP)

    def format(self) -> str:
        return str(self.to_decimal())

    def _check(self, other: "Money"):
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._check(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._check(other)
        return Money(self.amount - other.amount, self.currency)

    def __neg__(self):
        return Money(-self.amount, self.currency)


def format_minor(amount: int, currency: str) -> str:
    return Money(amount, normalize_currency(currency)).format()
