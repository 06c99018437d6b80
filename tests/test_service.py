"""Tests for the store-backed secret service."""

import random

import pytest

from shamirvault.crypto.shamir import ShamirScheme
from shamirvault.errors import InsufficientShares, InvalidParameters, ParseError, SessionNotFound
from shamirvault.vault.audit import AuditLog
from shamirvault.vault.models import PartialSecret
from shamirvault.vault.service import SecretService
from shamirvault.vault.store import InMemoryShareStore, InMemoryUserStore


KEY_HEX = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture()
def store():
    return InMemoryShareStore()


@pytest.fixture()
def service(store):
    return SecretService(store, scheme=ShamirScheme(rng=random.Random(0)), audit=AuditLog())


def test_partition_persists_one_record_per_party(service, store):
    records = service.partition(KEY_HEX, degree=2, parties=4, public_key="pk", user_id="alice")
    assert len(records) == 4
    assert all(r.id and r.secret_degree == 2 and r.public_key == "pk" for r in records)
    assert len(store.find_by_public_key("pk")) == 4


def test_partition_then_recover(service):
    service.partition(KEY_HEX, degree=3, parties=5, public_key="pk", user_id="alice")
    assert service.recover("pk") == KEY_HEX


def test_recover_with_quorum_only(service, store):
    service.partition(KEY_HEX, degree=2, parties=5, public_key="pk", user_id="alice")
    for r in store.find_by_public_key("pk")[:2]:
        store._records.pop(r.id)
    assert service.recover("pk") == KEY_HEX


def test_recover_below_threshold(service, store):
    service.partition(KEY_HEX, degree=2, parties=3, public_key="pk", user_id="alice")
    store._records.pop(store.find_by_public_key("pk")[0].id)
    with pytest.raises(InsufficientShares) as exc:
        service.recover("pk")
    assert exc.value.required == 3
    assert exc.value.got == 2


def test_recover_unknown_key(service):
    with pytest.raises(SessionNotFound) as exc:
        service.recover("missing")
    assert exc.value.public_key == "missing"


def test_recover_rejects_mixed_degrees(service, store):
    service.partition(KEY_HEX, degree=2, parties=3, public_key="pk", user_id="alice")
    store.save_many(
        [PartialSecret(user_id="alice", public_key="pk", partial_secret="9||1", secret_degree=4)]
    )
    with pytest.raises(InvalidParameters):
        service.recover("pk")


def test_partition_rejects_bad_hex(service, store):
    with pytest.raises(ParseError):
        service.partition("not-hex", degree=2, parties=3, public_key="pk", user_id="alice")
    assert len(store) == 0


def test_pure_helpers(service):
    shares = service.split_secret("0x2a", degree=2, parties=3)
    assert service.recover_secret(shares, 2) == "0" * 62 + "2a"


def test_audit_trail(service):
    service.partition(KEY_HEX, degree=2, parties=3, public_key="pk", user_id="alice")
    service.recover("pk")
    events = [e["event"] for e in service.audit.entries()]
    assert events[0] == "split"
    assert events[-1] == "reconstruct"
    assert events.count("lagrange_term") == 3
    assert KEY_HEX not in str(service.audit.entries())
    assert service.audit.verify_chain()


def test_default_scheme(store):
    service = SecretService(store)
    service.partition(KEY_HEX, degree=2, parties=3, public_key="pk", user_id="alice")
    assert service.recover("pk", user_id="alice") == KEY_HEX


# ---------- wallet registration ----------


def test_register_wallet_stores_user_and_shares(service, store):
    user = service.register_wallet("0xpub", KEY_HEX, degree=2, holders_count=4)
    assert user.id
    assert user.wallet("0xpub").degree == 2
    assert service.users.get_user(user.id).wallets == user.wallets

    records = store.find_by_public_key("0xpub")
    assert len(records) == 4
    assert {r.user_id for r in records} == {user.id}
    assert service.recover("0xpub", user_id=user.id) == KEY_HEX


def test_register_wallet_rejects_too_few_holders(service, store):
    with pytest.raises(InvalidParameters):
        service.register_wallet("0xpub", KEY_HEX, degree=3, holders_count=3)
    assert len(service.users) == 0
    assert len(store) == 0


def test_register_wallet_rejects_bad_hex(service):
    with pytest.raises(ParseError):
        service.register_wallet("0xpub", "zz", degree=2, holders_count=3)
    assert len(service.users) == 0


def test_register_wallet_twice_reuses_user(service, store):
    first = service.register_wallet("0xpub", KEY_HEX, degree=2, holders_count=3)
    second = service.register_wallet("0xpub", KEY_HEX, degree=2, holders_count=3)
    assert first.id == second.id
    assert len(service.users) == 1
    assert len(store.find_by_public_key("0xpub")) == 3
    assert service.recover("0xpub") == KEY_HEX


def test_register_wallet_uses_injected_user_store(store):
    users = InMemoryUserStore()
    service = SecretService(store, users=users)
    user = service.register_wallet("0xpub", KEY_HEX, degree=2, holders_count=3)
    assert users.get_user(user.id) is not None
