"""Error codes raised by the auction program."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Every way an auction instruction can be rejected, with its message."""

    INVALID_PRICE_RANGE = (
        "start_price must be strictly greater than floor_price, and floor_price must be > 0"
    )
    INVALID_DECAY_SLOTS = "decay_slots must be at least 1"
    INVALID_PRICE_STEPS = "price_steps must be between 1 and 1000"
    STEP_SIZE_TOO_SMALL = (
        "step_size is too small — increase the price range or reduce price_steps"
    )
    START_SLOT_IN_PAST = "start_slot must be >= current slot"
    TITLE_TOO_LONG = "Title exceeds 64 bytes"
    AUCTION_NOT_BIDDABLE = "Auction is not open for bidding"
    AUCTION_NOT_STARTED = "Auction has not reached its start slot yet"
    AUCTION_EXPIRED = "Auction has passed its end slot with no winner"
    BID_TOO_LOW = "Bid amount is below the current auction price"
    UNAUTHORIZED = "Signer is not authorized for this action"
    CANNOT_CANCEL = "Auction cannot be cancelled — it may already have a winner"
    AUCTION_NOT_EXPIRED = "Auction end slot has not passed yet"
    ALREADY_SETTLED = "Auction is already in a terminal state"
    MATH_OVERFLOW = "Arithmetic overflow in price calculation"

    @property
    def message(self) -> str:
        return self.value


class AuctionError(Exception):
    """Raised when an auction instruction fails; ``code`` says why."""

    def __init__(self, code: ErrorCode) -> None:
        super().__init__(code.message)
        self.code = code

    @property
    def message(self) -> str:
        return self.code.message

    def __repr__(self) -> str:
        return f"AuctionError({self.code.name})"