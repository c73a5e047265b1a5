from __future__ import annotations

from decimal import Decimal, localcontext

from domain.token import BASIS_POINTS_DENOMINATOR


def format_decimal(value: Decimal) -> str:
    quantized = value.normalize()
    # Avoid scientific notation for integers.
    if quantized == quantized.to_integral():
        return f"{quantized:.0f}"
    return format(quantized, "f")


def wei_to_tokens(amount: int, decimals: int) -> Decimal:
    return Decimal(f"{amount}e-{decimals}")


def format_token_amount(amount: int, decimals: int, symbol: str | None = None) -> str:
    # uint256-sized amounts exceed the default 28-digit context.
    with localcontext() as ctx:
        ctx.prec = 100
        text = format_decimal(wei_to_tokens(amount, decimals))
    return f"{text} {symbol}" if symbol else text


def format_basis_points(bps: int) -> str:
    percent = Decimal(bps) * 100 / BASIS_POINTS_DENOMINATOR
    return f"{format_decimal(percent)}%"
