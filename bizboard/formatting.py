"""Money formatting for the screens."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from bizboard.config import AppSettings, get_settings


def format_currency(
    amount: Union[Decimal, int, float, str],
    settings: Optional[AppSettings] = None,
) -> str:
    """
    Format an amount with the configured currency symbol and separators.

    Defaults give US formatting of USD: ``$1,234.50``, ``-$50.00``.
    """
    settings = settings or get_settings().app
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    integer, _, fraction = f"{abs(value):,.2f}".partition(".")
    integer = integer.replace(",", settings.thousands_separator)

    return f"{sign}{settings.currency_symbol}{integer}{settings.decimal_separator}{fraction}"
