"""Slot-driven price schedule of a Dutch auction.

The price is a pure function of the auction's creation parameters and
the current slot:

    steps_elapsed = min((current_slot - start_slot) // decay_slots, price_steps)
    current_price = max(start_price - steps_elapsed * step_size, floor_price)
"""

from __future__ import annotations

from .errors import AuctionError, ErrorCode

U64_MAX = 2**64 - 1


def compute_current_price(
    start_price: int,
    floor_price: int,
    start_slot: int,
    decay_slots: int,
    price_steps: int,
    step_size: int,
    current_slot: int,
) -> int:
    """Return the auction price at ``current_slot``.

    Before ``start_slot`` the start price applies; the price never falls
    below ``floor_price``. Raises :class:`AuctionError` with
    ``MATH_OVERFLOW`` if the total drop does not fit in 64 bits.
    """
    if current_slot < start_slot:
        return start_price
    if decay_slots <= 0:
        raise AuctionError(ErrorCode.INVALID_DECAY_SLOTS)

    steps_elapsed = min((current_slot - start_slot) // decay_slots, price_steps)

    total_drop = step_size * steps_elapsed
    if total_drop > U64_MAX:
        raise AuctionError(ErrorCode.MATH_OVERFLOW)

    price = start_price - total_drop
    if price < 0:
        price = floor_price
    return max(price, floor_price)


def price_at_slot(
    start_price: int,
    floor_price: int,
    start_slot: int,
    decay_slots: int,
    price_steps: int,
    step_size: int,
    target_slot: int,
) -> int:
    """Preview the price at ``target_slot``, falling back to the floor on overflow."""
    try:
        return compute_current_price(
            start_price,
            floor_price,
            start_slot,
            decay_slots,
            price_steps,
            step_size,
            target_slot,
        )
    except AuctionError as err:
        if err.code is not ErrorCode.MATH_OVERFLOW:
            raise
        return floor_price