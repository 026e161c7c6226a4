"""Constant product reserve arithmetic.

UniswapV2 pairs hold reserve_in * reserve_out constant (modulo the fee)
and charge 0.3% on the input amount:

    amount_out = (in * 997 * res_out) / (res_in * 1000 + in * 997)
    amount_in  = (res_in * out * 1000) / ((res_out - out) * 997) + 1

Everything is floor-divided integer math so results match the pair
contract to the wei. The +1 in amount_in rounds in the pair's favor, so the
computed input always delivers at least the requested output.
"""

from uniswappy.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from uniswappy.errors import InsufficientLiquidity, InvalidAmount, InvalidReserve
from uniswappy.safe_int import S


def _check_reserves(reserve_in: int, reserve_out: int) -> None:
    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidReserve(
            f"Reserves must be positive, got reserve_in={reserve_in}, reserve_out={reserve_out}"
        )


def get_amount_out(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    """Calculate output amount for an exact input.

    Args:
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        amount_in: Input token amount
        fee_numerator: Fee multiplier numerator (default 997)
        fee_denominator: Fee multiplier denominator (default 1000)

    Returns:
        Output token amount, floored

    Raises:
        InvalidReserve: If either reserve is not positive
        InvalidAmount: If amount_in is negative
    """
    _check_reserves(reserve_in, reserve_out)
    if amount_in < 0:
        raise InvalidAmount(f"amount_in cannot be negative: {amount_in}")

    amount_in_with_fee = S(amount_in) * fee_numerator
    numerator = amount_in_with_fee * reserve_out
    denominator = S(reserve_in) * fee_denominator + amount_in_with_fee

    return (numerator // denominator).value


def get_amount_in(
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    """Calculate the input required for an exact output.

    Args:
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        amount_out: Desired output token amount
        fee_numerator: Fee multiplier numerator (default 997)
        fee_denominator: Fee multiplier denominator (default 1000)

    Returns:
        Required input token amount

    Raises:
        InvalidReserve: If either reserve is not positive
        InvalidAmount: If amount_out is negative
        InsufficientLiquidity: If amount_out >= reserve_out
    """
    _check_reserves(reserve_in, reserve_out)
    if amount_out < 0:
        raise InvalidAmount(f"amount_out cannot be negative: {amount_out}")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Cannot take {amount_out} out of a reserve of {reserve_out}"
        )

    numerator = S(reserve_in) * amount_out * fee_denominator
    denominator = (S(reserve_out) - amount_out) * fee_numerator

    return ((numerator // denominator) + 1).value


__all__ = ["get_amount_out", "get_amount_in"]
