"""Account records kept by the auction program and their binary layout."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Optional

MAX_TITLE_LEN = 64
PUBKEY_LEN = 32


def _discriminator(name: str) -> bytes:
    return hashlib.sha256(f"account:{name}".encode()).digest()[:8]


def _pubkey(key: bytes) -> bytes:
    if len(key) != PUBKEY_LEN:
        raise ValueError(f"public key must be {PUBKEY_LEN} bytes, got {len(key)}")
    return bytes(key)


def _pack(fmt: str, *values: int) -> bytes:
    try:
        return struct.pack(fmt, *values)
    except struct.error as exc:
        raise ValueError(str(exc)) from exc


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ValueError("account data is truncated")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def unpack(self, fmt: str) -> tuple:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))

    def expect(self, prefix: bytes, what: str) -> None:
        if self.take(len(prefix)) != prefix:
            raise ValueError(f"data is not a {what} account")


class AuctionStatus(IntEnum):
    """Auction lifecycle; Sold, Expired and Cancelled are terminal."""

    PENDING = 0
    ACTIVE = 1
    SOLD = 2
    EXPIRED = 3
    CANCELLED = 4

    @property
    def is_terminal(self) -> bool:
        return self in (AuctionStatus.SOLD, AuctionStatus.EXPIRED, AuctionStatus.CANCELLED)


@dataclass
class AuctionState:
    """The primary auction record."""

    auction_id: int
    seller: bytes
    start_price: int
    floor_price: int
    start_slot: int
    end_slot: int
    decay_slots: int
    price_steps: int
    step_size: int
    title: str
    status: AuctionStatus = AuctionStatus.PENDING
    winner: Optional[bytes] = None
    winning_price: int = 0
    bid_count: int = 0
    created_at: int = 0
    bump: int = 0
    vault_bump: int = 0

    DISCRIMINATOR: ClassVar[bytes] = _discriminator("AuctionState")
    LEN: ClassVar[int] = (
        8  # discriminator
        + 8  # auction_id
        + 32  # seller
        + 8 * 7  # prices, slots, decay, steps, step size
        + 4 + MAX_TITLE_LEN  # title
        + 1  # status
        + 1 + 32  # winner
        + 8  # winning_price
        + 4  # bid_count
        + 8  # created_at
        + 1  # bump
        + 1  # vault_bump
    )

    def pack(self) -> bytes:
        """Serialise the record, discriminator first."""
        title = self.title.encode("utf-8")
        if len(title) > MAX_TITLE_LEN:
            raise ValueError(f"title exceeds {MAX_TITLE_LEN} bytes")
        winner = b"\x00" if self.winner is None else b"\x01" + _pubkey(self.winner)
        return b"".join(
            [
                self.DISCRIMINATOR,
                _pack("<Q", self.auction_id),
                _pubkey(self.seller),
                _pack(
                    "<7Q",
                    self.start_price,
                    self.floor_price,
                    self.start_slot,
                    self.end_slot,
                    self.decay_slots,
                    self.price_steps,
                    self.step_size,
                ),
                _pack("<I", len(title)),
                title,
                _pack("<B", int(self.status)),
                winner,
                _pack(
                    "<QIqBB",
                    self.winning_price,
                    self.bid_count,
                    self.created_at,
                    self.bump,
                    self.vault_bump,
                ),
            ]
        )

    @classmethod
    def unpack(cls, data: bytes) -> AuctionState:
        """Parse a record produced by :meth:`pack`."""
        reader = _Reader(data)
        reader.expect(cls.DISCRIMINATOR, "AuctionState")
        (auction_id,) = reader.unpack("<Q")
        seller = reader.take(PUBKEY_LEN)
        prices = reader.unpack("<7Q")
        (title_len,) = reader.unpack("<I")
        try:
            title = reader.take(title_len).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError("title is not valid UTF-8") from exc
        (status_byte,) = reader.unpack("<B")
        try:
            status = AuctionStatus(status_byte)
        except ValueError as exc:
            raise ValueError(f"unknown auction status {status_byte}") from exc
        (tag,) = reader.unpack("<B")
        if tag == 0:
            winner = None
        elif tag == 1:
            winner = reader.take(PUBKEY_LEN)
        else:
            raise ValueError(f"invalid option tag {tag}")
        winning_price, bid_count, created_at, bump, vault_bump = reader.unpack("<QIqBB")
        start_price, floor_price, start_slot, end_slot, decay_slots, price_steps, step_size = prices
        return cls(
            auction_id=auction_id,
            seller=seller,
            start_price=start_price,
            floor_price=floor_price,
            start_slot=start_slot,
            end_slot=end_slot,
            decay_slots=decay_slots,
            price_steps=price_steps,
            step_size=step_size,
            title=title,
            status=status,
            winner=winner,
            winning_price=winning_price,
            bid_count=bid_count,
            created_at=created_at,
            bump=bump,
            vault_bump=vault_bump,
        )


@dataclass(frozen=True)
class SettlementRecord:
    """Immutable receipt written when a bid wins."""

    auction_id: int
    winner: bytes
    seller: bytes
    price_paid: int
    overpayment: int
    winning_slot: int
    settled_at: int
    bump: int = 0

    DISCRIMINATOR: ClassVar[bytes] = _discriminator("SettlementRecord")
    LEN: ClassVar[int] = 8 + 8 + 32 + 32 + 8 + 8 + 8 + 8 + 1

    def pack(self) -> bytes:
        """Serialise the record, discriminator first."""
        return b"".join(
            [
                self.DISCRIMINATOR,
                _pack("<Q", self.auction_id),
                _pubkey(self.winner),
                _pubkey(self.seller),
                _pack(
                    "<QQQqB",
                    self.price_paid,
                    self.overpayment,
                    self.winning_slot,
                    self.settled_at,
                    self.bump,
                ),
            ]
        )

    @classmethod
    def unpack(cls, data: bytes) -> SettlementRecord:
        """Parse a record produced by :meth:`pack`."""
        reader = _Reader(data)
        reader.expect(cls.DISCRIMINATOR, "SettlementRecord")
        (auction_id,) = reader.unpack("<Q")
        winner = reader.take(PUBKEY_LEN)
        seller = reader.take(PUBKEY_LEN)
        price_paid, overpayment, winning_slot, settled_at, bump = reader.unpack("<QQQqB")
        return cls(
            auction_id=auction_id,
            winner=winner,
            seller=seller,
            price_paid=price_paid,
            overpayment=overpayment,
            winning_slot=winning_slot,
            settled_at=settled_at,
            bump=bump,
        )