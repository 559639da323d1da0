"""Pure arithmetic for the `amm_pool` engine.

Every function is stateless and operates on plain Python ints.

Stored quantities are unsigned 64-bit. Products such as ``amount * reserve`` are
formed in arbitrary precision and only the final quotient is narrowed back to
64 bits, with an explicit range check instead of wrap-around. Division is
Python's ``//`` (floor), which is exact truncation for the non-negative operands
used here.
"""

from __future__ import annotations

from .errors import ArithmeticOverflow, DivisionByZero, InsufficientShares, InvalidInput

U64_MAX: int = (1 << 64) - 1
FEE_DENOM_MILLI: int = 1000
MAX_FEE_RATE_MILLI: int = FEE_DENOM_MILLI - 1


# -- 64-bit helpers ----------------------------------------------------------

def require_u64(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative: {value}")
    if value > U64_MAX:
        raise ArithmeticOverflow(f"{name} exceeds 64 bits: {value}")
    return value


def require_fee_rate(fee_rate_milli: int) -> int:
    require_u64("fee_rate_milli", fee_rate_milli)
    if fee_rate_milli > MAX_FEE_RATE_MILLI:
        raise InvalidInput(f"fee_rate_milli must be in [0, {MAX_FEE_RATE_MILLI}]: {fee_rate_milli}")
    return fee_rate_milli


def checked_add_u64(a: int, b: int, *, name: str = "sum") -> int:
    total = a + b
    if total > U64_MAX:
        raise ArithmeticOverflow(f"{name} overflows 64 bits: {a} + {b}")
    return total


def checked_sub_u64(a: int, b: int, *, name: str = "difference") -> int:
    if b > a:
        raise ArithmeticOverflow(f"{name} underflows: {a} - {b}")
    return a - b


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """``floor(a * b / denominator)`` with a wide intermediate and a 64-bit result."""
    if denominator == 0:
        raise DivisionByZero("denominator is zero")
    result = (a * b) // denominator
    if result > U64_MAX:
        raise ArithmeticOverflow(f"mul_div result exceeds 64 bits: {a} * {b} / {denominator}")
    return result


# -- Pricing -----------------------------------------------------------------

def quote_swap(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_rate_milli: int,
) -> tuple[int, int]:
    """
    Exact-in quote on the constant-product curve.

        fee_amount   = floor(amount_in * fee_rate_milli / 1000)
        effective_in = amount_in - fee_amount
        amount_out   = floor(effective_in * reserve_out / (reserve_in + effective_in))

    Pricing uses the fee-adjusted input, so
    ``(reserve_in + effective_in) * (reserve_out - amount_out) >= reserve_in * reserve_out``.

    Returns:
        ``(amount_out, fee_amount)``

    Raises:
        DivisionByZero: If either reserve is zero.
        InvalidInput: If ``amount_in`` is zero, the fee rate is out of range,
            or the output would drain the reserve.
    """
    require_u64("amount_in", amount_in)
    require_u64("reserve_in", reserve_in)
    require_u64("reserve_out", reserve_out)
    require_fee_rate(fee_rate_milli)

    if reserve_in == 0 or reserve_out == 0:
        raise DivisionByZero(f"cannot price against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_in == 0:
        raise InvalidInput("amount_in must be positive")

    fee_amount = mul_div_floor(amount_in, fee_rate_milli, FEE_DENOM_MILLI)
    effective_in = amount_in - fee_amount
    amount_out = mul_div_floor(effective_in, reserve_out, reserve_in + effective_in)

    # Implied by the formula; kept as an explicit check.
    if amount_out >= reserve_out:
        raise InvalidInput(f"swap would drain the output reserve: {amount_out} >= {reserve_out}")

    return amount_out, fee_amount


def quote_swap_exact_out(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    fee_rate_milli: int,
) -> int:
    """
    Smallest ``amount_in`` for which ``quote_swap`` yields at least ``amount_out``.

    The fee-adjusted input needed is ``ceil(amount_out * reserve_in / (reserve_out - amount_out))``;
    the gross input is then found by bisection because the floored fee makes
    ``x - floor(x * fee / 1000)`` a step function.
    """
    require_u64("amount_out", amount_out)
    require_u64("reserve_in", reserve_in)
    require_u64("reserve_out", reserve_out)
    require_fee_rate(fee_rate_milli)

    if reserve_in == 0 or reserve_out == 0:
        raise DivisionByZero(f"cannot price against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_out == 0:
        raise InvalidInput("amount_out must be positive")
    if amount_out >= reserve_out:
        raise InvalidInput(f"cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})")

    remaining = reserve_out - amount_out
    effective_needed = (amount_out * reserve_in + remaining - 1) // remaining

    def _effective(x: int) -> int:
        return x - (x * fee_rate_milli) // FEE_DENOM_MILLI

    net_denom = FEE_DENOM_MILLI - fee_rate_milli
    hi = (effective_needed * FEE_DENOM_MILLI + net_denom - 1) // net_denom
    lo = effective_needed
    while lo < hi:
        mid = (lo + hi) // 2
        if _effective(mid) >= effective_needed:
            hi = mid
        else:
            lo = mid + 1

    if lo > U64_MAX:
        raise ArithmeticOverflow(f"required amount_in exceeds 64 bits: {lo}")
    return lo


def spot_price_milli(reserve_in: int, reserve_out: int) -> int:
    """Marginal output per 1000 units of input, before fees. Informational only."""
    if reserve_in == 0 or reserve_out == 0:
        raise DivisionByZero("spot price of an empty pool is undefined")
    return (reserve_out * FEE_DENOM_MILLI) // reserve_in


# -- Shares ------------------------------------------------------------------

def compute_shares_minted(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """
    Shares minted for a deposit.

    First deposit (``total_shares == 0``):
        shares = amount_a + amount_b

    Subsequent deposits:
        shares = min(floor(amount_a * total_shares / reserve_a),
                     floor(amount_b * total_shares / reserve_b))

    The excess of the over-supplied side is kept by the pool. A deposit too
    small to mint a whole share mints 0 and is still kept.
    """
    if amount_a <= 0 or amount_b <= 0:
        raise InvalidInput(f"deposit amounts must be positive: ({amount_a}, {amount_b})")

    if total_shares == 0:
        return checked_add_u64(amount_a, amount_b, name="initial shares")

    if reserve_a == 0 or reserve_b == 0:
        raise DivisionByZero("pool has shares outstanding but an empty reserve")
    share_a = mul_div_floor(amount_a, total_shares, reserve_a)
    share_b = mul_div_floor(amount_b, total_shares, reserve_b)
    return min(share_a, share_b)


def compute_withdrawal(
    shares_burned: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """
    Asset amounts returned for a share burn.

        amount_a = floor(shares_burned * reserve_a / total_shares)
        amount_b = floor(shares_burned * reserve_b / total_shares)
    """
    if shares_burned <= 0:
        raise InvalidInput(f"shares_burned must be positive: {shares_burned}")
    if shares_burned > total_shares:
        raise InsufficientShares(f"cannot burn more shares than supply: {shares_burned} > {total_shares}")

    amount_a = mul_div_floor(shares_burned, reserve_a, total_shares)
    amount_b = mul_div_floor(shares_burned, reserve_b, total_shares)
    return amount_a, amount_b
