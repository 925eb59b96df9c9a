"""
Property-based checks that supply and ownership invariants hold after any
sequence of collection operations, including rejected ones.
"""

import pytest
from hypothesis import given, settings, strategies as st

from nft_collection import ZERO_ADDRESS, CollectionError, NftCollection

OWNER = "0x" + "11" * 20
USERS = ["0x" + "22" * 20, "0x" + "33" * 20, "0x" + "44" * 20]
CALLERS = [OWNER] + USERS

token_ids = st.integers(min_value=-1, max_value=8)
callers = st.sampled_from(CALLERS)
targets = st.sampled_from(USERS + [ZERO_ADDRESS])

operations = st.one_of(
    st.tuples(st.just("mint"), callers, targets, token_ids),
    st.tuples(st.just("batch_mint"), callers, targets, st.lists(token_ids, max_size=6)),
    st.tuples(st.just("burn"), callers, token_ids),
    st.tuples(st.just("transfer"), callers, st.sampled_from(CALLERS), targets, token_ids),
    st.tuples(st.just("approve"), callers, targets, token_ids),
    st.tuples(st.just("operator"), callers, st.sampled_from(CALLERS), st.booleans()),
)


def _apply(contract: NftCollection, op: tuple) -> None:
    kind, caller, *args = op
    if kind == "mint":
        contract.safe_mint(caller, *args)
    elif kind == "batch_mint":
        contract.batch_mint(caller, *args)
    elif kind == "burn":
        contract.burn(caller, *args)
    elif kind == "transfer":
        contract.transfer_from(caller, *args)
    elif kind == "approve":
        contract.approve(caller, *args)
    elif kind == "operator":
        contract.set_approval_for_all(caller, *args)


@given(
    max_supply=st.integers(min_value=1, max_value=6),
    ops=st.lists(operations, max_size=40),
)
@settings(max_examples=75, deadline=None)
def test_invariants_hold_for_any_operation_sequence(max_supply, ops):
    contract = NftCollection("MyNFT", "MNFT", max_supply, "ipfs://x/", OWNER)

    for op in ops:
        snapshot = contract.to_dict()
        events_before = len(contract.events)
        try:
            _apply(contract, op)
        except CollectionError:
            assert contract.to_dict() == snapshot
            assert len(contract.events) == events_before

        report = contract.verify_consistency()
        assert report["is_consistent"], report
        assert 0 <= contract.total_supply() <= contract.max_supply
        assert contract.remaining_supply() == max_supply - contract.total_supply()
        assert not contract.token_exists(0)
        assert sum(contract.balance_of(user) for user in CALLERS) == contract.total_supply()


@given(
    first=st.sampled_from(USERS),
    second=st.sampled_from(USERS),
    spender=st.sampled_from(USERS),
    token_id=st.integers(min_value=1, max_value=10**6),
)
@settings(max_examples=50, deadline=None)
def test_mint_burn_remint_round_trip(first, second, spender, token_id):
    contract = NftCollection("MyNFT", "MNFT", 3, "ipfs://x/", OWNER)

    contract.safe_mint(OWNER, first, token_id)
    contract.approve(first, spender, token_id)
    contract.burn(first, token_id)
    contract.safe_mint(OWNER, second, token_id)

    assert contract.owner_of(token_id) == second
    assert contract.get_approved(token_id) == ZERO_ADDRESS
    assert contract.token_uri(token_id) == f"ipfs://x/{token_id}"


@given(ids=st.lists(st.integers(min_value=1, max_value=50), min_size=1, max_size=15))
@settings(max_examples=75, deadline=None)
def test_batch_mint_is_all_or_nothing(ids):
    contract = NftCollection("MyNFT", "MNFT", 10, "ipfs://x/", OWNER)

    try:
        contract.batch_mint(OWNER, USERS[0], ids)
    except CollectionError:
        assert contract.total_supply() == 0
        assert contract.events == []
        assert len(ids) > 10 or len(set(ids)) != len(ids)
    else:
        assert contract.total_supply() == len(ids)
        assert len(set(ids)) == len(ids)
        assert [e.token_id for e in contract.events_of_type("TokenMinted")] == ids


@pytest.mark.parametrize("count", [1, 5, 10])
def test_supply_never_exceeds_cap(count):
    contract = NftCollection("MyNFT", "MNFT", count, "ipfs://x/", OWNER)
    for token_id in range(1, count + 1):
        contract.safe_mint(OWNER, USERS[0], token_id)

    with pytest.raises(CollectionError):
        contract.safe_mint(OWNER, USERS[0], count + 1)
    assert contract.total_supply() == count
