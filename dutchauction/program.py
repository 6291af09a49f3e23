"""The auction program: instructions over an in-memory ledger of accounts."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, replace
from typing import Optional, Union

from .errors import AuctionError, ErrorCode
from .events import AuctionCancelled, AuctionCreated, AuctionExpired, BidWon
from .price import compute_current_price
from .state import (
    MAX_TITLE_LEN,
    PUBKEY_LEN,
    AuctionState,
    AuctionStatus,
    SettlementRecord,
)

U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1
MAX_PRICE_STEPS = 1000

_PROGRAM_SEED = b"dutch_auction"
_PDA_MARKER = b"ProgramDerivedAddress"

Event = Union[AuctionCreated, BidWon, AuctionCancelled, AuctionExpired]


def _find_address(*seeds: bytes) -> tuple[bytes, int]:
    bump = 255
    digest = hashlib.sha256(
        b"".join(seeds) + bytes([bump]) + _PROGRAM_SEED + _PDA_MARKER
    ).digest()
    return digest, bump


def _id_bytes(auction_id: int) -> bytes:
    return struct.pack("<Q", _u64(auction_id, "auction_id"))


def _u64(value: int, name: str) -> int:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer")
    return value


def _key(value: bytes, name: str) -> bytes:
    if len(value) != PUBKEY_LEN:
        raise ValueError(f"{name} must be a {PUBKEY_LEN}-byte public key")
    return bytes(value)


def auction_address(auction_id: int, seller: bytes) -> bytes:
    """Address of the auction record for ``auction_id`` created by ``seller``."""
    return _find_address(b"auction", _id_bytes(auction_id), _key(seller, "seller"))[0]


def vault_address(auction_id: int) -> bytes:
    """Address of the vault that holds bid lamports for ``auction_id``."""
    return _find_address(b"vault", _id_bytes(auction_id))[0]


def settlement_address(auction_id: int) -> bytes:
    """Address of the settlement receipt for ``auction_id``."""
    return _find_address(b"settlement", _id_bytes(auction_id))[0]


@dataclass
class Clock:
    """The cluster clock as seen by instructions."""

    slot: int = 0
    unix_timestamp: int = 0


class AuctionProgram:
    """Runs auction instructions against a ledger of lamport balances.

    Every instruction either completes entirely or raises and leaves the
    ledger untouched. Emitted events are appended to :attr:`events`.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock if clock is not None else Clock()
        self.events: list[Event] = []
        self._balances: dict[bytes, int] = {}
        self._auctions: dict[bytes, AuctionState] = {}
        self._vaults: set[bytes] = set()
        self._settlements: dict[int, SettlementRecord] = {}

    # ── ledger ───────────────────────────────────────────────────

    def deposit(self, account: bytes, lamports: int) -> None:
        """Credit ``lamports`` to ``account``."""
        account = _key(account, "account")
        if lamports < 0:
            raise ValueError("lamports must not be negative")
        new_balance = self._balances.get(account, 0) + lamports
        _u64(new_balance, "balance")
        self._balances[account] = new_balance

    def balance(self, account: bytes) -> int:
        """Lamports held by ``account``."""
        return self._balances.get(bytes(account), 0)

    def auction(self, key: bytes) -> AuctionState:
        """A copy of the open auction stored at ``key``; KeyError if none."""
        try:
            return replace(self._auctions[bytes(key)])
        except KeyError:
            raise KeyError("auction account does not exist") from None

    def settlement(self, auction_id: int) -> SettlementRecord:
        """The settlement receipt of ``auction_id``; KeyError if none."""
        try:
            return self._settlements[auction_id]
        except KeyError:
            raise KeyError("settlement account does not exist") from None

    def _transfer(self, source: bytes, destination: bytes, lamports: int) -> None:
        available = self._balances.get(source, 0)
        if lamports > available:
            raise ValueError("insufficient lamports for transfer")
        self._balances[source] = available - lamports
        self._balances[destination] = self._balances.get(destination, 0) + lamports

    def _load(self, auction_key: bytes) -> AuctionState:
        try:
            return self._auctions[bytes(auction_key)]
        except KeyError:
            raise KeyError("auction account does not exist") from None

    # ── instructions ─────────────────────────────────────────────

    def create_auction(
        self,
        seller: bytes,
        auction_id: int,
        start_price: int,
        floor_price: int,
        start_slot: int,
        decay_slots: int,
        price_steps: int,
        title: str,
    ) -> bytes:
        """Open a new auction and return the address of its record."""
        seller = _key(seller, "seller")
        for name, value in (
            ("start_price", start_price),
            ("floor_price", floor_price),
            ("start_slot", start_slot),
            ("decay_slots", decay_slots),
            ("price_steps", price_steps),
        ):
            _u64(value, name)

        id_bytes = _id_bytes(auction_id)
        auction_key, auction_bump = _find_address(b"auction", id_bytes, seller)
        vault_key, vault_bump = _find_address(b"vault", id_bytes)
        if auction_key in self._auctions:
            raise ValueError("auction account already in use")
        if vault_key in self._vaults:
            raise ValueError("vault account already in use")

        if not start_price > floor_price:
            raise AuctionError(ErrorCode.INVALID_PRICE_RANGE)
        if not floor_price > 0:
            raise AuctionError(ErrorCode.INVALID_PRICE_RANGE)
        if not decay_slots > 0:
            raise AuctionError(ErrorCode.INVALID_DECAY_SLOTS)
        if not 0 < price_steps <= MAX_PRICE_STEPS:
            raise AuctionError(ErrorCode.INVALID_PRICE_STEPS)
        if len(title.encode("utf-8")) > MAX_TITLE_LEN:
            raise AuctionError(ErrorCode.TITLE_TOO_LONG)
        if start_slot < self.clock.slot:
            raise AuctionError(ErrorCode.START_SLOT_IN_PAST)

        total_slots = decay_slots * price_steps
        if total_slots > U64_MAX:
            raise AuctionError(ErrorCode.MATH_OVERFLOW)
        end_slot = start_slot + total_slots
        if end_slot > U64_MAX:
            raise AuctionError(ErrorCode.MATH_OVERFLOW)
        step_size = (start_price - floor_price) // price_steps
        if step_size <= 0:
            raise AuctionError(ErrorCode.STEP_SIZE_TOO_SMALL)

        self._auctions[auction_key] = AuctionState(
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
            status=AuctionStatus.PENDING,
            winner=None,
            winning_price=0,
            bid_count=0,
            created_at=self.clock.unix_timestamp,
            bump=auction_bump,
            vault_bump=vault_bump,
        )
        self._vaults.add(vault_key)
        self.events.append(
            AuctionCreated(
                auction_id=auction_id,
                seller=seller,
                start_price=start_price,
                floor_price=floor_price,
                start_slot=start_slot,
                end_slot=end_slot,
                title=title,
            )
        )
        return auction_key

    def place_bid(
        self, bidder: bytes, auction_key: bytes, seller: bytes, bid_amount: int
    ) -> SettlementRecord:
        """Buy the auction at the current price; any excess is refunded.

        The auction record is closed and a settlement receipt is written.
        """
        bidder = _key(bidder, "bidder")
        seller = _key(seller, "seller")
        _u64(bid_amount, "bid_amount")
        auction = self._load(auction_key)

        if seller != auction.seller:
            raise AuctionError(ErrorCode.UNAUTHORIZED)
        if auction.status is AuctionStatus.SOLD:
            raise AuctionError(ErrorCode.AUCTION_NOT_BIDDABLE)
        if auction.status is AuctionStatus.EXPIRED:
            raise AuctionError(ErrorCode.AUCTION_EXPIRED)
        if auction.status is AuctionStatus.CANCELLED:
            raise AuctionError(ErrorCode.AUCTION_NOT_BIDDABLE)
        vault_key, _ = _find_address(b"vault", _id_bytes(auction.auction_id))
        settlement_key, settlement_bump = _find_address(
            b"settlement", _id_bytes(auction.auction_id)
        )
        if auction.auction_id in self._settlements:
            raise ValueError("settlement account already in use")

        current_slot = self.clock.slot
        if current_slot < auction.start_slot:
            raise AuctionError(ErrorCode.AUCTION_NOT_STARTED)
        if current_slot > auction.end_slot:
            raise AuctionError(ErrorCode.AUCTION_EXPIRED)

        current_price = compute_current_price(
            auction.start_price,
            auction.floor_price,
            auction.start_slot,
            auction.decay_slots,
            auction.price_steps,
            auction.step_size,
            current_slot,
        )
        if bid_amount < current_price:
            raise AuctionError(ErrorCode.BID_TOO_LOW)

        self._transfer(bidder, vault_key, bid_amount)
        overpayment = bid_amount - current_price
        if overpayment > 0:
            self._transfer(vault_key, bidder, overpayment)
        self._transfer(vault_key, seller, current_price)

        record = SettlementRecord(
            auction_id=auction.auction_id,
            winner=bidder,
            seller=auction.seller,
            price_paid=current_price,
            overpayment=overpayment,
            winning_slot=current_slot,
            settled_at=self.clock.unix_timestamp,
            bump=settlement_bump,
        )
        self._settlements[auction.auction_id] = record

        auction.status = AuctionStatus.SOLD
        auction.winner = bidder
        auction.winning_price = current_price
        auction.bid_count = min(auction.bid_count + 1, U32_MAX)

        self.events.append(
            BidWon(
                auction_id=auction.auction_id,
                winner=bidder,
                price_paid=current_price,
                overpayment=overpayment,
                winning_slot=current_slot,
            )
        )
        del self._auctions[bytes(auction_key)]
        return record

    def cancel_auction(self, seller: bytes, auction_key: bytes) -> AuctionCancelled:
        """Let the seller withdraw an auction that has no winner; closes it."""
        seller = _key(seller, "seller")
        auction = self._load(auction_key)
        if auction.seller != seller:
            raise AuctionError(ErrorCode.UNAUTHORIZED)
        if auction.winner is not None:
            raise AuctionError(ErrorCode.CANNOT_CANCEL)
        if auction.status not in (AuctionStatus.PENDING, AuctionStatus.ACTIVE):
            raise AuctionError(ErrorCode.CANNOT_CANCEL)
        event = AuctionCancelled(auction_id=auction.auction_id, cancelled_by=seller)
        self.events.append(event)
        del self._auctions[bytes(auction_key)]
        return event

    def settle_expired(
        self, caller: bytes, auction_key: bytes, seller: bytes
    ) -> AuctionExpired:
        """Close an auction whose end slot has passed; anyone may call this."""
        _key(caller, "caller")
        seller = _key(seller, "seller")
        auction = self._load(auction_key)
        if seller != auction.seller:
            raise AuctionError(ErrorCode.UNAUTHORIZED)
        if not self.clock.slot > auction.end_slot:
            raise AuctionError(ErrorCode.AUCTION_NOT_EXPIRED)
        if auction.status.is_terminal:
            raise AuctionError(ErrorCode.ALREADY_SETTLED)
        event = AuctionExpired(
            auction_id=auction.auction_id,
            seller=auction.seller,
            end_slot=auction.end_slot,
        )
        self.events.append(event)
        del self._auctions[bytes(auction_key)]
        return event