import pytest

from seedfund_ledger.constants import PRECISION, TOKEN_UNIT
from seedfund_ledger.errors import (
    AssetAlreadyRegistered,
    BatchTooLarge,
    InvalidFeeConfig,
    InvalidRange,
    NotAdmin,
    NotHolder,
    NothingToClaim,
    UnknownAsset,
)
from seedfund_ledger.events import Claimed, FeeConfigChanged, InflowApplied, InflowStranded

UNIT = TOKEN_UNIT
ADMIN = "0xadmin"
FEE_SINK = "0xfeesink"
ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"
TOKEN_X = "0x00000000000000000000000000000000000000aa"
TOKEN_Y = "0x00000000000000000000000000000000000000bb"
TOKEN_Z = "0x00000000000000000000000000000000000000cc"


def test_fully_subscribed_fund_pays_one_unit_per_record_less_fee(sim, seed_inflow):
    """200 records, 200 units received, 1% fee: each record nets 0.99 units."""
    sim.fund.deposit(ALICE, 5)
    sim.fund.deposit(BOB, 1)
    sim.fund.deposit(CAROL, 194)

    seed_inflow(sim, TOKEN_X, 200 * UNIT)
    assert sim.fund.asset_state(TOKEN_X).accumulator_per_share == UNIT * PRECISION
    assert sim.fund.pending(5, TOKEN_X) == UNIT

    result = sim.fund.claim(BOB, 5, TOKEN_X)
    assert (result.gross, result.fee, result.payout) == (UNIT, UNIT // 100, 99 * UNIT // 100)
    assert sim.bank.balance_of(TOKEN_X, BOB) == 99 * UNIT // 100
    assert sim.bank.balance_of(TOKEN_X, FEE_SINK) == UNIT // 100
    assert sim.fund.custody_balance(TOKEN_X) == 199 * UNIT
    assert sim.fund.pending(5, TOKEN_X) == 0


def test_late_record_only_shares_in_inflows_after_it_exists(make_sim, seed_inflow):
    sim = make_sim(max_supply=1_000)
    sim.fund.deposit(ALICE, 100)
    seed_inflow(sim, TOKEN_X, 100 * UNIT)

    assert sim.fund.deposit(BOB, 1) == [100]
    assert sim.fund.debt_of(100, TOKEN_X) == sim.fund.asset_state(TOKEN_X).accumulator_per_share
    assert sim.fund.pending(100, TOKEN_X) == 0

    seed_inflow(sim, TOKEN_X, 101 * UNIT)
    assert sim.fund.pending(0, TOKEN_X) == 2 * UNIT
    assert sim.fund.pending(100, TOKEN_X) == 1 * UNIT


def test_second_claim_without_new_inflow_has_nothing_to_claim(sim, seed_inflow):
    sim.fund.deposit(ALICE, 2)
    seed_inflow(sim, TOKEN_X, 10 * UNIT)
    sim.fund.claim(ALICE, 0, TOKEN_X)

    with pytest.raises(NothingToClaim):
        sim.fund.claim(ALICE, 0, TOKEN_X)
    assert len(sim.fund.events.of_type(Claimed)) == 1


def test_claimed_plus_pending_equals_everything_accrued(sim, seed_inflow):
    sim.fund.deposit(ALICE, 2)
    sim.fund.deposit(BOB, 2)
    seed_inflow(sim, TOKEN_X, 400 * UNIT)
    first = sim.fund.claim(ALICE, 0, TOKEN_X)
    seed_inflow(sim, TOKEN_X, 40 * UNIT)

    claimed = sim.fund.claim_history(0)[TOKEN_X]
    assert claimed == 100 * UNIT
    assert first.fee + first.payout == first.gross
    assert claimed + sim.fund.pending(0, TOKEN_X) == 110 * UNIT
    assert sim.fund.pending(2, TOKEN_X) == 110 * UNIT


def test_rounding_dust_stays_in_custody(sim, seed_inflow):
    sim.fund.deposit(ALICE, 3)
    seed_inflow(sim, TOKEN_X, 10)

    assert [sim.fund.pending(i, TOKEN_X) for i in range(3)] == [3, 3, 3]
    assert sim.fund.outstanding(TOKEN_X) == 9
    assert sim.fund.custody_balance(TOKEN_X) == 10


def test_small_claim_fee_rounds_down_to_zero(sim, seed_inflow):
    sim.fund.deposit(ALICE, 1)
    seed_inflow(sim, TOKEN_X, 99)
    result = sim.fund.claim(ALICE, 0, TOKEN_X)
    assert (result.fee, result.payout) == (0, 99)
    assert sim.bank.balance_of(TOKEN_X, FEE_SINK) == 0


def test_only_the_holder_may_claim(sim, seed_inflow):
    sim.fund.deposit(ALICE, 1)
    seed_inflow(sim, TOKEN_X, UNIT)
    with pytest.raises(NotHolder):
        sim.fund.claim(BOB, 0, TOKEN_X)


def test_new_holder_claims_what_accrued_before_the_transfer(make_sim, seed_inflow):
    sim = make_sim(max_supply=2)
    sim.fund.deposit(ALICE, 2)
    seed_inflow(sim, TOKEN_X, 2 * UNIT)
    sim.fund.transfer(ALICE, 1, BOB)

    result = sim.fund.claim(BOB, 1, TOKEN_X)
    assert result.holder == BOB
    assert result.gross == UNIT


def test_claim_of_unknown_asset_raises(sim):
    sim.fund.deposit(ALICE, 1)
    with pytest.raises(UnknownAsset):
        sim.fund.claim(ALICE, 0, TOKEN_X)
    with pytest.raises(UnknownAsset):
        sim.fund.pending(0, TOKEN_X)


def test_inflow_with_no_records_is_stranded(sim, seed_inflow):
    result = seed_inflow(sim, TOKEN_X, 5 * UNIT)
    assert result.ok and result.newly_registered

    state = sim.fund.asset_state(TOKEN_X)
    assert state.stranded == 5 * UNIT
    assert state.cumulative_received == 0
    assert state.accumulator_per_share == 0
    assert [e.amount for e in sim.fund.events.of_type(InflowStranded)] == [5 * UNIT]
    assert sim.fund.events.of_type(InflowApplied) == []

    sim.fund.deposit(ALICE, 1)
    assert sim.fund.pending(0, TOKEN_X) == 0


def test_admin_registration_starts_every_record_at_zero(sim, seed_inflow):
    sim.fund.deposit(ALICE, 2)
    state = sim.fund.register_asset(ADMIN, TOKEN_Y)
    assert (state.index, state.accumulator_per_share) == (0, 0)
    assert sim.fund.pending(0, TOKEN_Y) == 0

    with pytest.raises(AssetAlreadyRegistered):
        sim.fund.register_asset(ADMIN, TOKEN_Y.upper().replace("0X", "0x"))
    with pytest.raises(NotAdmin):
        sim.fund.register_asset(ALICE, TOKEN_Z)

    seed_inflow(sim, TOKEN_Y, 2 * UNIT)
    assert sim.fund.pending(1, TOKEN_Y) == UNIT


def test_fee_config_changes_apply_to_later_claims(sim, seed_inflow):
    sim.fund.deposit(ALICE, 2)
    seed_inflow(sim, TOKEN_X, 2 * UNIT)

    sim.fund.set_fee_config(ADMIN, 0, "0xOtherSink")
    assert sim.fund.events.of_type(FeeConfigChanged)[-1].fee_sink == "0xothersink"
    result = sim.fund.claim(ALICE, 0, TOKEN_X)
    assert (result.fee, result.payout) == (0, UNIT)

    sim.fund.set_fee_config(ADMIN, 10_000, FEE_SINK)
    result = sim.fund.claim(ALICE, 1, TOKEN_X)
    assert (result.fee, result.payout) == (UNIT, 0)
    assert sim.bank.balance_of(TOKEN_X, ALICE) == UNIT


@pytest.mark.parametrize("fee_bps, fee_sink", [(-1, FEE_SINK), (10_001, FEE_SINK), (100, "")])
def test_invalid_fee_config_is_rejected(sim, fee_bps, fee_sink):
    with pytest.raises(InvalidFeeConfig):
        sim.fund.set_fee_config(ADMIN, fee_bps, fee_sink)
    assert sim.fund.fee_config.fee_bps == 100


def test_claim_batch_skips_assets_with_nothing_due(sim, seed_inflow):
    sim.fund.deposit(ALICE, 1)
    seed_inflow(sim, TOKEN_X, 3 * UNIT)
    sim.fund.register_asset(ADMIN, TOKEN_Y)
    seed_inflow(sim, TOKEN_Z, 7 * UNIT)

    results = sim.fund.claim_batch(ALICE, 0, 0, 3)
    assert [(r.asset, r.gross) for r in results] == [(TOKEN_X, 3 * UNIT), (TOKEN_Z, 7 * UNIT)]
    assert sim.fund.claim_batch(ALICE, 0, 0, 3) == []


def test_claim_batch_window_is_bounded(make_sim, seed_inflow):
    sim = make_sim(max_batch_size=2)
    sim.fund.deposit(ALICE, 1)
    for token in (TOKEN_X, TOKEN_Y, TOKEN_Z):
        seed_inflow(sim, token, UNIT)

    with pytest.raises(BatchTooLarge):
        sim.fund.claim_batch(ALICE, 0, 0, 3)
    with pytest.raises(InvalidRange):
        sim.fund.claim_batch(ALICE, 0, 3, 1)

    assert [r.asset for r in sim.fund.claim_batch(ALICE, 0, 1, 2)] == [TOKEN_Y, TOKEN_Z]
    assert [r.asset for r in sim.fund.claim_batch(ALICE, 0, 0, 2)] == [TOKEN_X]


def test_pending_batch_truncates_at_the_end_of_the_catalog(sim, seed_inflow):
    sim.fund.deposit(ALICE, 2)
    seed_inflow(sim, TOKEN_X, 2 * UNIT)
    seed_inflow(sim, TOKEN_Y, 4 * UNIT)
    seed_inflow(sim, TOKEN_Z, 6 * UNIT)

    full = sim.fund.pending_batch(1, 0, 50)
    assert [(e.asset, e.amount) for e in full] == [(TOKEN_X, UNIT), (TOKEN_Y, 2 * UNIT), (TOKEN_Z, 3 * UNIT)]
    assert [e.asset for e in sim.fund.pending_batch(1, 2, 10)] == [TOKEN_Z]
    assert sim.fund.pending_batch(1, 3, 10) == []
    assert sim.fund.pending_batch(1, 100, 1) == []
    assert sum(e.amount for e in full) == sum(sim.fund.pending(1, t) for t in (TOKEN_X, TOKEN_Y, TOKEN_Z))

    with pytest.raises(BatchTooLarge):
        sim.fund.pending_batch(1, 0, 51)
    with pytest.raises(InvalidRange):
        sim.fund.pending_batch(1, -1, 1)


def test_debt_never_exceeds_accumulator(sim, seed_inflow):
    sim.fund.deposit(ALICE, 3)
    seed_inflow(sim, TOKEN_X, 7 * UNIT + 1)
    sim.fund.claim(ALICE, 1, TOKEN_X)
    sim.fund.deposit(BOB, 1)
    seed_inflow(sim, TOKEN_X, 3)

    acc = sim.fund.asset_state(TOKEN_X).accumulator_per_share
    assert all(sim.fund.debt_of(i, TOKEN_X) <= acc for i in range(4))
    assert sim.fund.debt_of(1, TOKEN_X) > 0
    assert sim.fund.debt_of(0, TOKEN_X) == 0


def test_accumulator_only_moves_on_inflow_and_never_down(make_sim, seed_inflow):
    sim = make_sim(max_supply=3)
    sim.fund.deposit(ALICE, 1)
    seed_inflow(sim, TOKEN_X, 5 * UNIT)
    history = [sim.fund.asset_state(TOKEN_X).accumulator_per_share]

    sim.fund.claim(ALICE, 0, TOKEN_X)
    history.append(sim.fund.asset_state(TOKEN_X).accumulator_per_share)
    sim.fund.deposit(BOB, 2)
    history.append(sim.fund.asset_state(TOKEN_X).accumulator_per_share)
    sim.fund.transfer(BOB, 1, CAROL)
    history.append(sim.fund.asset_state(TOKEN_X).accumulator_per_share)
    seed_inflow(sim, TOKEN_X, 3)
    history.append(sim.fund.asset_state(TOKEN_X).accumulator_per_share)

    assert history[0] == history[1] == history[2] == history[3] == 5 * UNIT * PRECISION
    assert history[4] == history[3] + 3 * PRECISION // 3
    assert sim.fund.supply.transfer_unlocked
