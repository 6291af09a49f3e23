import pytest

from dutchauction.errors import AuctionError, ErrorCode
from dutchauction.price import U64_MAX, compute_current_price, price_at_slot


def price(current_slot):
    # start=1000, floor=100, start_slot=0, decay=10 slots, steps=9, step_size=100
    return compute_current_price(1000, 100, 0, 10, 9, 100, current_slot)


def test_starts_at_start_price():
    assert price(0) == 1000


def test_before_start_returns_start_price():
    assert compute_current_price(1000, 100, 50, 10, 9, 100, 30) == 1000


def test_drops_after_first_decay_period():
    assert price(10) == 900
    assert price(11) == 900
    assert price(19) == 900


@pytest.mark.parametrize(
    "slot, expected",
    [(20, 800), (30, 700), (40, 600), (50, 500)],
)
def test_drops_at_each_boundary(slot, expected):
    assert price(slot) == expected


def test_floors_at_floor_price():
    assert price(90) == 100
    assert price(200) == 100
    assert price(U64_MAX // 2) == 100


def test_never_goes_below_floor():
    for slot in range(200):
        p = price(slot)
        assert 100 <= p <= 1000, f"price {p} out of range at slot {slot}"


def test_monotonically_decreasing():
    prev = price(0)
    for slot in range(1, 200):
        curr = price(slot)
        assert curr <= prev, f"price increased at slot {slot}: {curr} > {prev}"
        prev = curr


def test_overflowing_drop_raises_math_overflow():
    with pytest.raises(AuctionError) as info:
        compute_current_price(1000, 100, 0, 1, 5, 2**63, 10)
    assert info.value.code is ErrorCode.MATH_OVERFLOW


def test_price_at_slot_matches_compute():
    for slot in (0, 10, 35, 90, 500):
        assert price_at_slot(1000, 100, 0, 10, 9, 100, slot) == price(slot)


def test_price_at_slot_falls_back_to_floor_on_overflow():
    assert price_at_slot(1000, 100, 0, 1, 5, 2**63, 10) == 100


def test_zero_decay_slots_rejected():
    with pytest.raises(AuctionError) as info:
        price_at_slot(1000, 100, 0, 0, 9, 100, 5)
    assert info.value.code is ErrorCode.INVALID_DECAY_SLOTS