"""
Currency formatting for supported display currencies.

GBP uses standard thousands grouping (en-GB); INR uses the Indian
lakh/crore grouping (en-IN), e.g. 1,23,456.78.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from finsight.core.entities.finance import Currency
from finsight.core.exceptions import UnsupportedCurrencyError


@dataclass(frozen=True)
class CurrencyConfig:
    code: Currency
    symbol: str
    locale: str
    name: str


CURRENCIES: dict[Currency, CurrencyConfig] = {
    Currency.GBP: CurrencyConfig(Currency.GBP, "£", "en-GB", "British Pound"),
    Currency.INR: CurrencyConfig(Currency.INR, "₹", "en-IN", "Indian Rupee"),
}

_CENT = Decimal("0.01")


def get_currency(code: str | Currency) -> CurrencyConfig:
    """Look up a currency, raising UnsupportedCurrencyError for unknown codes."""
    try:
        return CURRENCIES[Currency(code.upper())]
    except ValueError:
        raise UnsupportedCurrencyError(str(code), [c.value for c in Currency]) from None


def get_currency_symbol(code: str | Currency) -> str:
    return get_currency(code).symbol


def _group_standard(digits: str) -> str:
    return f"{int(digits):,}"


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(amount: Decimal | float | int, code: str | Currency) -> str:
    """Format an amount with symbol, locale grouping and two decimals."""
    config = get_currency(code)
    value = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    if config.code == Currency.INR:
        grouped = _group_indian(whole)
    else:
        grouped = _group_standard(whole)
    return f"{sign}{config.symbol}{grouped}.{fraction}"
