"""Cashback normalization.

A cashback request carries both a percent and an amount. When the paying
account has a cashback policy, both are clamped against the account's
percent limit and absolute cap. The two caps are expressed in different
units, so clamping runs percent -> amount -> percent -> amount to land on a
value that respects both at once.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from spendbook.domain import errors
from spendbook.domain.entities import CashbackPolicy, CashbackRequest, CashbackResult
from spendbook.domain.errors import ValidationError

ZERO = Decimal(0)
HUNDRED = Decimal(100)
_WHOLE_UNIT = Decimal(1)
_PERCENT_PLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert ints, floats, strings and Decimals to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. Unparseable input becomes
    NaN, which callers reject as non-finite.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("NaN")


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return min(max(value, low), high)


def _round_whole(value: Decimal) -> Decimal:
    return value.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)


def _finite_or(value: Optional[Decimal], fallback: Decimal) -> Decimal:
    if value is None or not value.is_finite():
        return fallback
    return value


def _finite_or_none(value) -> Optional[Decimal]:
    if value is None:
        return None
    value = to_decimal(value)
    return value if value.is_finite() else None


def validate_cashback_request(amount: Decimal, requested: CashbackRequest) -> None:
    """Reject out-of-range cashback input before any clamping happens.

    Raises:
        ValidationError: If the percent is outside [0, 100], the amount is
            negative or non-finite, or the amount exceeds ``amount``
    """
    percent = to_decimal(requested.percent)
    cashback = to_decimal(requested.amount)

    if not percent.is_finite() or percent < ZERO or percent > HUNDRED:
        raise ValidationError(errors.cashback_percent_out_of_range())
    if not cashback.is_finite() or cashback < ZERO:
        raise ValidationError(errors.cashback_amount_negative())
    if cashback > amount:
        raise ValidationError(errors.cashback_exceeds_amount())


def compute_cashback(
    amount,
    requested: Optional[CashbackRequest],
    policy: Optional[CashbackPolicy] = None,
) -> CashbackResult:
    """Compute the normalized cashback for a transaction.

    Args:
        amount: Transaction amount, must be finite and greater than zero
        requested: Percent (0-100) and amount the user asked for, or None
            for no cashback
        policy: Caps of the paying account, or None when no account policy
            applies (non-expense transaction, no account, or an account that
            is not cashback eligible)

    Returns:
        CashbackResult with the percent rounded to 2 places, the amount
        rounded to whole currency units, and the final price

    Raises:
        ValidationError: If the amount or the requested cashback is invalid
    """
    amount = to_decimal(amount)
    if not amount.is_finite() or amount <= ZERO:
        raise ValidationError("Invalid amount.")

    if requested is None:
        return CashbackResult(percent=ZERO, amount=ZERO, final_price=amount)

    validate_cashback_request(amount, requested)

    base_percent = _clamp(to_decimal(requested.percent), ZERO, HUNDRED)
    base_amount = _clamp(to_decimal(requested.amount), ZERO, amount)

    normalized_amount = base_amount
    allowed_ceiling = amount

    if policy is not None:
        percent_limit = _finite_or_none(policy.percent_limit)
        if percent_limit is not None:
            percent_limit = max(ZERO, percent_limit)
        max_amount = _finite_or_none(policy.max_amount)

        limit_from_percent = (
            percent_limit / HUNDRED * amount if percent_limit is not None else amount
        )
        limit_from_max = max_amount if max_amount is not None else amount
        allowed_amount = max(
            ZERO,
            min(
                _finite_or(limit_from_percent, amount),
                _finite_or(limit_from_max, amount),
                amount,
            ),
        )
        allowed_ceiling = allowed_amount

        # First pass: requested amount and requested percent against the cap.
        candidate = min(base_amount, base_percent / HUNDRED * amount, amount)
        constrained = _clamp(candidate, ZERO, allowed_amount)

        # Second pass: the percent implied by that amount against both limits.
        implied_percent = constrained / amount * HUNDRED
        percent_from_allowed = allowed_amount / amount * HUNDRED
        if percent_limit is not None:
            effective_limit = min(percent_limit, percent_from_allowed, HUNDRED)
        else:
            effective_limit = min(percent_from_allowed, HUNDRED)
        normalized_percent = _clamp(implied_percent, ZERO, effective_limit)

        amount_from_percent = normalized_percent / HUNDRED * amount
        normalized_amount = max(
            ZERO, min(constrained, amount_from_percent, allowed_amount)
        )

    normalized_amount = max(
        ZERO,
        min(_round_whole(normalized_amount), amount, _round_whole(allowed_ceiling)),
    )
    normalized_percent = max(
        ZERO,
        (normalized_amount / amount * HUNDRED).quantize(
            _PERCENT_PLACES, rounding=ROUND_HALF_UP
        ),
    )

    return CashbackResult(
        percent=normalized_percent,
        amount=normalized_amount,
        final_price=max(ZERO, amount - normalized_amount),
    )


def percent_amount(amount, percent) -> Decimal:
    """Return ``percent`` of ``amount`` rounded to whole units, 0 if unknown."""
    if amount is None or percent is None:
        return ZERO
    value = to_decimal(amount) * to_decimal(percent) / HUNDRED
    if not value.is_finite():
        return ZERO
    return _round_whole(value)
