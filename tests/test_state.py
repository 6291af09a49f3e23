import pytest

from dutchauction.state import (
    MAX_TITLE_LEN,
    AuctionState,
    AuctionStatus,
    SettlementRecord,
)

SELLER = bytes([1]) * 32
BIDDER = bytes([2]) * 32


def make_auction(**overrides):
    fields = dict(
        auction_id=42,
        seller=SELLER,
        start_price=1000,
        floor_price=100,
        start_slot=0,
        end_slot=90,
        decay_slots=10,
        price_steps=9,
        step_size=100,
        title="Lamp",
    )
    fields.update(overrides)
    return AuctionState(**fields)


def make_settlement(**overrides):
    fields = dict(
        auction_id=42,
        winner=BIDDER,
        seller=SELLER,
        price_paid=900,
        overpayment=25,
        winning_slot=12,
        settled_at=-5,
        bump=254,
    )
    fields.update(overrides)
    return SettlementRecord(**fields)


def test_terminal_statuses_survive_round_trip():
    terminal = set()
    for status in AuctionStatus:
        restored = AuctionState.unpack(make_auction(status=status).pack()).status
        assert restored is status
        if restored.is_terminal:
            terminal.add(restored)
    assert terminal == {AuctionStatus.SOLD, AuctionStatus.EXPIRED, AuctionStatus.CANCELLED}


def test_new_auction_defaults():
    auction = make_auction()
    assert auction.status is AuctionStatus.PENDING
    assert auction.winner is None
    assert auction.winning_price == 0
    assert auction.bid_count == 0


def test_auction_round_trip():
    auction = make_auction(
        status=AuctionStatus.SOLD,
        winner=BIDDER,
        winning_price=900,
        bid_count=1,
        created_at=-1,
        bump=255,
        vault_bump=253,
    )
    assert AuctionState.unpack(auction.pack()) == auction


def test_auction_round_trip_without_winner():
    auction = make_auction(title="Ünïcode title")
    assert AuctionState.unpack(auction.pack()) == auction


def test_full_auction_fills_declared_space():
    auction = make_auction(title="x" * MAX_TITLE_LEN, winner=BIDDER)
    assert len(auction.pack()) == AuctionState.LEN


def test_smaller_auction_fits_declared_space():
    assert len(make_auction().pack()) < AuctionState.LEN


def test_title_too_long_rejected():
    with pytest.raises(ValueError):
        make_auction(title="x" * (MAX_TITLE_LEN + 1)).pack()


def test_bad_pubkey_rejected():
    with pytest.raises(ValueError):
        make_auction(seller=b"short").pack()


def test_out_of_range_integer_rejected():
    with pytest.raises(ValueError):
        make_auction(start_price=2**64).pack()


def test_truncated_auction_rejected():
    data = make_auction().pack()
    with pytest.raises(ValueError):
        AuctionState.unpack(data[:-1])


def test_wrong_discriminator_rejected():
    with pytest.raises(ValueError):
        AuctionState.unpack(make_settlement().pack())


def test_settlement_round_trip():
    record = make_settlement()
    assert SettlementRecord.unpack(record.pack()) == record


def test_settlement_fills_declared_space():
    assert len(make_settlement().pack()) == SettlementRecord.LEN == 113


def test_settlement_wrong_discriminator_rejected():
    with pytest.raises(ValueError):
        SettlementRecord.unpack(make_auction().pack())