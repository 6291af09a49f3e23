import dataclasses

import pytest

from dutchauction.events import AuctionCancelled, AuctionCreated, AuctionExpired, BidWon

SELLER = bytes([1]) * 32
BIDDER = bytes([2]) * 32


def test_auction_created_fields():
    event = AuctionCreated(
        auction_id=7,
        seller=SELLER,
        start_price=1000,
        floor_price=100,
        start_slot=5,
        end_slot=95,
        title="Lamp",
    )
    assert event.auction_id == 7
    assert event.seller == SELLER
    assert (event.start_price, event.floor_price) == (1000, 100)
    assert (event.start_slot, event.end_slot) == (5, 95)
    assert event.title == "Lamp"


def test_bid_won_is_immutable():
    event = BidWon(auction_id=1, winner=BIDDER, price_paid=900, overpayment=50, winning_slot=12)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.price_paid = 1  # type: ignore[misc]
    assert event.price_paid == 900


def test_events_compare_by_value():
    a = AuctionCancelled(auction_id=3, cancelled_by=SELLER)
    b = AuctionCancelled(auction_id=3, cancelled_by=SELLER)
    c = AuctionCancelled(auction_id=4, cancelled_by=SELLER)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c


def test_auction_expired_replace():
    event = AuctionExpired(auction_id=9, seller=SELLER, end_slot=100)
    later = dataclasses.replace(event, end_slot=200)
    assert later.end_slot == 200
    assert event.end_slot == 100
    assert later.seller == event.seller