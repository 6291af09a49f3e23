"""Events emitted by the auction program."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuctionCreated:
    """Emitted when an auction is created."""

    auction_id: int
    seller: bytes
    start_price: int
    floor_price: int
    start_slot: int
    end_slot: int
    title: str


@dataclass(frozen=True)
class BidWon:
    """Emitted the moment a winning bid lands; describes the full trade."""

    auction_id: int
    winner: bytes
    price_paid: int
    overpayment: int
    winning_slot: int


@dataclass(frozen=True)
class AuctionCancelled:
    """Emitted when the seller cancels an auction."""

    auction_id: int
    cancelled_by: bytes


@dataclass(frozen=True)
class AuctionExpired:
    """Emitted when an auction passes its end slot without a winner."""

    auction_id: int
    seller: bytes
    end_slot: int