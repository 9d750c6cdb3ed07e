from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


# Round to currency minor units
def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value) -> str:
    return f"{to_money(value):.2f}"
