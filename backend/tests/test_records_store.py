import threading

import pytest

from notekeeper.storage.addressing import address_to_str, find_address
from notekeeper.storage.errors import (
    AddressMismatch,
    AlreadyExists,
    ContentTooLong,
    NotFound,
    TitleEmpty,
    TitleTooLong,
    Unauthorized,
)
from notekeeper.storage.record_layout import RECORD_SIZE
from notekeeper.storage.records_store import _record_path
from notekeeper.utils.principal import encode_identity


def test_create_then_read_matches_inputs(store, clock):
    address, note = store.create_note("userA", "Shopping", "milk")

    stored = store.get_note(address)
    assert stored == note
    assert stored.owner_user_id == "userA"
    assert stored.title == "Shopping"
    assert stored.content == "milk"
    assert stored.created_at == stored.updated_at == clock.now


def test_create_uses_derived_address(store):
    address, note = store.create_note("userA", "Shopping", "milk")
    expected, bump = find_address(encode_identity("userA"), "Shopping")
    assert address == address_to_str(expected)
    assert note.bump == bump


def test_stored_record_has_fixed_size(store, tmp_path):
    address, _ = store.create_note("userA", "t", "")
    assert _record_path(tmp_path, address).stat().st_size == RECORD_SIZE


@pytest.mark.parametrize("content", ["", "some content", "x" * 501])
def test_empty_title_always_rejected(store, content):
    with pytest.raises(TitleEmpty):
        store.create_note("userA", "", content)


def test_title_limit_boundary(store):
    with pytest.raises(TitleTooLong):
        store.create_note("userA", "t" * 51, "c")
    store.create_note("userA", "t" * 50, "c")


def test_content_limit_boundary(store):
    with pytest.raises(ContentTooLong):
        store.create_note("userA", "title", "c" * 501)
    store.create_note("userA", "title", "c" * 500)


def test_validation_order_title_before_content(store):
    with pytest.raises(TitleTooLong):
        store.create_note("userA", "t" * 51, "c" * 501)


def test_create_twice_same_title_fails(store, clock):
    address, first = store.create_note("userA", "Shopping", "milk")
    clock.advance(10)

    with pytest.raises(AlreadyExists):
        store.create_note("userA", "Shopping", "something else")

    assert store.get_note(address) == first


def test_same_title_different_owners_are_independent(store):
    a, _ = store.create_note("userA", "Shopping", "milk")
    b, _ = store.create_note("userB", "Shopping", "bread")
    assert a != b
    assert store.get_note(a).content == "milk"
    assert store.get_note(b).content == "bread"


def test_update_by_non_owner_leaves_record_unchanged(store, clock):
    address, before = store.create_note("userA", "Shopping", "milk")
    clock.advance(5)

    with pytest.raises(Unauthorized):
        store.update_note("userB", address, title="Hacked", content="hacked")

    assert store.get_note(address) == before


def test_update_without_overrides_bumps_timestamp(store, clock):
    address, before = store.create_note("userA", "Shopping", "milk")
    clock.advance(3)

    after = store.update_note("userA", address)

    assert after.title == before.title
    assert after.content == before.content
    assert after.created_at == before.created_at
    assert after.updated_at == before.updated_at + 3


def test_update_never_moves_updated_at_backwards(store, clock):
    address, before = store.create_note("userA", "Shopping", "milk")
    clock.advance(-100)

    after = store.update_note("userA", address, content="eggs")
    assert after.updated_at >= before.updated_at >= after.created_at


@pytest.mark.parametrize("bad_title, error", [("", TitleEmpty), ("t" * 51, TitleTooLong)])
def test_update_with_invalid_title_applies_nothing(store, clock, bad_title, error):
    address, before = store.create_note("userA", "Shopping", "milk")
    clock.advance(1)

    with pytest.raises(error):
        store.update_note("userA", address, title=bad_title, content="valid content")

    assert store.get_note(address) == before


def test_update_with_invalid_content_applies_nothing(store):
    address, before = store.create_note("userA", "Shopping", "milk")

    with pytest.raises(ContentTooLong):
        store.update_note("userA", address, title="New", content="c" * 501)

    assert store.get_note(address) == before


def test_update_missing_record(store):
    address = address_to_str(find_address(encode_identity("userA"), "nothing here")[0])
    with pytest.raises(NotFound):
        store.update_note("userA", address, content="x")


def test_title_change_pins_record_to_original_address(store, clock):
    address, _ = store.create_note("userA", "Shopping", "milk")

    renamed = store.update_note("userA", address, title="Groceries")
    assert renamed.title == "Groceries"
    assert store.get_note(address).title == "Groceries"

    # the record is still stored under the original address, but the stored
    # title no longer re-derives it
    with pytest.raises(AddressMismatch):
        store.update_note("userA", address, content="eggs")
    with pytest.raises(AddressMismatch):
        store.delete_note("userA", address)

    assert store.get_note(address).content == "milk"


def test_delete_by_owner_removes_record(store, tmp_path):
    address, _ = store.create_note("userA", "Shopping", "milk")

    store.delete_note("userA", address)

    assert store.get_note(address) is None
    assert not _record_path(tmp_path, address).exists()
    with pytest.raises(NotFound):
        store.update_note("userA", address)
    with pytest.raises(NotFound):
        store.delete_note("userA", address)


def test_delete_by_non_owner_keeps_record(store):
    address, before = store.create_note("userA", "Shopping", "milk")

    with pytest.raises(Unauthorized):
        store.delete_note("userB", address)

    assert store.get_note(address) == before


def test_title_can_be_reused_after_delete(store):
    address, _ = store.create_note("userA", "Shopping", "milk")
    store.delete_note("userA", address)

    again, note = store.create_note("userA", "Shopping", "bread")
    assert again == address
    assert note.content == "bread"


def test_concurrent_creates_at_same_address_admit_one(store):
    results = []

    def worker(i):
        try:
            store.create_note("userA", "Race", f"writer {i}")
            results.append("ok")
        except AlreadyExists:
            results.append("exists")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("exists") == 7


def test_lifecycle_scenario(store, clock):
    address, created = store.create_note("A", "Shopping", "milk")
    t0 = created.created_at

    clock.advance(60)
    updated = store.update_note("A", address, content="milk, eggs")
    assert updated.content == "milk, eggs"
    assert updated.title == "Shopping"
    assert updated.updated_at == clock.now >= t0

    with pytest.raises(Unauthorized):
        store.delete_note("B", address)

    store.delete_note("A", address)
    with pytest.raises(NotFound):
        store.update_note("A", address)


def test_address_locks_are_released_after_each_operation(store):
    for i in range(1000):
        assert store.get_note(f"{i:064x}") is None
    assert len(store._locks) == 0

    address, _ = store.create_note("userA", "Shopping", "milk")
    store.get_note(address)
    store.update_note("userA", address, content="eggs")
    with pytest.raises(Unauthorized):
        store.delete_note("userB", address)
    store.delete_note("userA", address)

    assert len(store._locks) == 0
