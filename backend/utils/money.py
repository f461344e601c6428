from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {"USD": "$", "KHR": "៛"}

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def round_money(amount) -> Decimal:
    if amount is None:
        return Decimal("0.00")
    return Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_native(amount) -> Decimal:
    if amount is None:
        return Decimal("0.0000")
    return Decimal(amount).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def currency_symbol(currency_code: str) -> str:
    return CURRENCY_SYMBOLS.get(currency_code, "$")
