"""Currency arithmetic for cart lines and order totals.

Prices travel as floats on the aggregates and as strings or numbers on the
wire; every comparison and sum goes through ``Decimal`` rounded to cents so
that ``10.1 * 3`` and ``"30.30"`` agree.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENT = Decimal("0.01")


def to_money(value, field: str = "total") -> Decimal:
    """Parse ``value`` into a Decimal rounded to currency precision."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError({field: ["Valor é obrigatório."]})
    try:
        amount = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        raise ValidationError({field: [f"Valor inválido: {value!r}."]}) from None
    if not amount.is_finite():
        raise ValidationError({field: [f"Valor inválido: {value!r}."]})
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price, quantity) -> Decimal:
    return (to_money(price, "preco") * int(quantity)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_total(lines) -> Decimal:
    """Sum of price x quantity over dict lines (``price``/``quantity`` keys)."""
    total = sum((line_total(line["price"], line["quantity"]) for line in lines), Decimal("0"))
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount) -> str:
    """Render an amount the way the API exposes it: ``"25.50"``."""
    return f"{to_money(amount):.2f}"
