# dutchauction

A Dutch (descending-price) auction engine. The price of a lot starts high.
It drops by a fixed step every `decay_slots` slots until it reaches a floor.
The first bid at or above the current price wins.

The price is a pure function of the auction's parameters and the current
slot. Anyone who has the same inputs computes the same price.

## Installing

```
pip install .
```

To also install the test tools:

```
pip install ".[test]"
```

## Computing prices

```python
from dutchauction.price import compute_current_price, price_at_slot

# Start at 1000, floor at 100, start at slot 0, drop 100 every 10 slots, 9 steps.
compute_current_price(1000, 100, 0, 10, 9, 100, 25)   # 800
price_at_slot(1000, 100, 0, 10, 9, 100, 500)          # 100 (floor)
```

Before `start_slot` the price is `start_price`. After `price_steps` drops it
stays at `floor_price`. `compute_current_price` raises `AuctionError` with
`ErrorCode.MATH_OVERFLOW` if the total drop does not fit in 64 bits;
`price_at_slot` returns the floor price in that case.

## Running an auction

`AuctionProgram` (in `dutchauction.program`) keeps the open auctions, the
settlement records and the lamport balances in memory. It reads the current
slot and timestamp from a `Clock`. Account keys are 32-byte `bytes` values.

```python
from dutchauction.program import AuctionProgram, Clock

clock = Clock(slot=0)
program = AuctionProgram(clock)

seller = bytes([1]) * 32
bidder = bytes([2]) * 32
program.deposit(bidder, 10_000)

key = program.create_auction(
    seller, auction_id=1, start_price=1000, floor_price=100,
    start_slot=0, decay_slots=10, price_steps=9, title="Vintage lamp",
)

clock.slot = 35                                        # price is now 700
record = program.place_bid(bidder, key, seller, 750)   # the 50 overpaid goes back
record.price_paid, record.overpayment                  # (700, 50)
program.balance(seller), program.balance(bidder)       # (700, 9300)
```

- `create_auction` validates the parameters and returns the address of the
  new auction record.
- `place_bid` charges the current price, refunds any excess, closes the
  auction record and returns the `SettlementRecord`, also available later
  through `program.settlement(auction_id)`.
- `cancel_auction` lets the seller close an auction that has no winner and
  returns an `AuctionCancelled` event.
- `settle_expired` closes an auction whose end slot has passed; any caller
  may use it. It returns an `AuctionExpired` event.

`program.auction(key)` returns a copy of an open auction's `AuctionState`.
Every emitted event (`AuctionCreated`, `BidWon`, `AuctionCancelled`,
`AuctionExpired`, from `dutchauction.events`) is appended to
`program.events`. An instruction that fails leaves the ledger unchanged.

## Errors

A failed check raises `dutchauction.errors.AuctionError`. Its `code`
attribute holds an `ErrorCode` member, such as `ErrorCode.BID_TOO_LOW`,
`ErrorCode.AUCTION_EXPIRED` or `ErrorCode.UNAUTHORIZED`, and its message
explains the failure. Malformed input (a key that is not 32 bytes, a value
that does not fit in 64 bits, too few lamports to pay) raises `ValueError`;
an unknown auction or settlement raises `KeyError`.

## Records and addresses

`AuctionState` and `SettlementRecord` (in `dutchauction.state`) can be
serialised with `pack()` and read back with `unpack(data)`; each begins with
an 8-byte discriminator. `AuctionState.LEN` (228 bytes) and
`SettlementRecord.LEN` (113 bytes) give the space reserved for each record.
`AuctionStatus` lists the lifecycle states; `is_terminal` is true for
`SOLD`, `EXPIRED` and `CANCELLED`.

`auction_address`, `vault_address` and `settlement_address` give the
deterministic address of each record.

## What it does not do

Everything lives in memory for the life of an `AuctionProgram`: there is no
storage, no network, no command-line tool and no signature checking. Callers
pass account keys directly, and the clock is whatever the caller sets.