from __future__ import annotations

import logging
import threading
from datetime import timedelta

from user_service.store import NO_USERS_FOR_PAGE, USER_NOT_FOUND, UserStore

from conftest import START, FakeClock


def test_new_store_is_seeded_with_two_users(store: UserStore) -> None:
    assert len(store) == 2

    users = {user.id: user for user in store.snapshot()}
    assert set(users) == {"1", "2"}

    john = users["1"]
    assert (john.name, john.email, john.age) == ("John Doe", "john.doe@example.com", 30)
    assert john.created_at == START - timedelta(hours=24)
    assert john.updated_at == john.created_at

    jane = users["2"]
    assert (jane.name, jane.email, jane.age) == ("Jane Smith", "jane.smith@example.com", 25)
    assert jane.created_at == START - timedelta(hours=12)
    assert jane.updated_at == jane.created_at


def test_store_can_start_empty() -> None:
    store = UserStore(seed=False)
    assert len(store) == 0
    assert store.list(1, 10).total == 0


def test_get_existing_user(store: UserStore) -> None:
    response = store.get("1")

    assert response.success is True
    assert response.message == "User retrieved successfully"
    assert response.user is not None
    assert response.user.name == "John Doe"
    assert response.user.email == "john.doe@example.com"
    assert response.user.age == 30
    assert response.user.created_at == "2024-01-01T12:00:00Z"
    assert response.user.updated_at == "2024-01-01T12:00:00Z"


def test_get_missing_user_is_not_an_error(store: UserStore) -> None:
    response = store.get("999")

    assert response.success is False
    assert response.user is None
    assert response.message == USER_NOT_FOUND


def test_create_allocates_next_id(store: UserStore, clock: FakeClock) -> None:
    response = store.create("A", "a@x.com", 20)

    assert response.success is True
    assert response.message == "User created successfully"
    assert response.user.id == "3"
    assert response.user.created_at == response.user.updated_at == "2024-01-02T12:00:00Z"
    assert len(store) == 3
    assert store.get("3").user == response.user


def test_create_reuses_id_after_deletion(store: UserStore) -> None:
    store.delete("1")

    created = store.create("Replacement", "r@example.com", 40)

    # live count is 1, so the new record takes id "2" and replaces Jane Smith
    assert created.user.id == "2"
    assert len(store) == 1
    assert store.get("2").user.name == "Replacement"
    assert store.get("1").success is False


def test_create_accepts_empty_fields(store: UserStore) -> None:
    response = store.create("", "", 0)

    assert response.success is True
    assert (response.user.name, response.user.email, response.user.age) == ("", "", 0)


def test_update_with_empty_values_only_refreshes_timestamp(
    store: UserStore, clock: FakeClock
) -> None:
    before = store.get("1").user
    clock.advance(minutes=5)

    response = store.update("1", "", "", 0)

    assert response.success is True
    assert response.message == "User updated successfully"
    after = response.user
    assert (after.name, after.email, after.age) == (before.name, before.email, before.age)
    assert after.created_at == before.created_at
    assert after.updated_at == "2024-01-02T12:05:00Z"
    assert after.updated_at >= before.updated_at


def test_update_changes_only_supplied_name(store: UserStore) -> None:
    response = store.update("1", "New", "", 0)

    assert response.user.name == "New"
    assert response.user.email == "john.doe@example.com"
    assert response.user.age == 30


def test_update_ignores_non_positive_age(store: UserStore) -> None:
    assert store.update("2", "", "", -4).user.age == 25
    assert store.update("2", "", "jane@new.example", 26).user.email == "jane@new.example"
    assert store.get("2").user.age == 26


def test_update_missing_user(store: UserStore) -> None:
    response = store.update("42", "Ghost", "", 0)

    assert response.success is False
    assert response.user is None
    assert response.message == USER_NOT_FOUND
    assert "42" not in store


def test_updated_at_never_precedes_created_at(store: UserStore, clock: FakeClock) -> None:
    created = store.create("B", "b@x.com", 33).user
    clock.advance(seconds=1)
    store.update(created.id, "", "", 0)

    record = next(user for user in store.snapshot() if user.id == created.id)
    assert record.created_at <= record.updated_at


def test_delete_then_get(store: UserStore) -> None:
    response = store.delete("2")

    assert response.success is True
    assert response.message == "User deleted successfully"
    assert len(store) == 1
    assert store.get("2").success is False


def test_delete_missing_user_is_repeatable(store: UserStore) -> None:
    first = store.delete("999")
    second = store.delete("999")

    assert first.success is False and second.success is False
    assert first.message == second.message == USER_NOT_FOUND
    assert len(store) == 2


def test_list_first_page(store: UserStore) -> None:
    response = store.list(1, 1)

    assert response.success is True
    assert response.message == "Users retrieved successfully"
    assert len(response.users) == 1
    assert response.total == 2
    assert response.users[0].id in {"1", "2"}


def test_list_pages_cover_all_users(store: UserStore) -> None:
    first = store.list(1, 1).users
    second = store.list(2, 1).users

    assert {user.id for user in first + second} == {"1", "2"}


def test_list_page_past_the_end(store: UserStore) -> None:
    response = store.list(3, 1)

    assert response.success is True
    assert response.users == []
    assert response.total == 2
    assert response.message == NO_USERS_FOR_PAGE


def test_list_clamps_end_to_total(store: UserStore) -> None:
    store.create("C", "c@x.com", 50)

    response = store.list(1, 10)

    assert response.total == 3
    assert {user.id for user in response.users} == {"1", "2", "3"}


def test_list_with_unvalidated_bounds_does_not_raise(store: UserStore) -> None:
    zero_page = store.list(0, 2)
    assert zero_page.success is True
    assert zero_page.users == []
    assert zero_page.total == 2

    negative_limit = store.list(1, -1)
    assert negative_limit.success is True
    assert negative_limit.users == []

    zero_limit = store.list(1, 0)
    assert zero_limit.users == []
    assert zero_limit.message == "Users retrieved successfully"


def test_concurrent_creates_allocate_distinct_ids() -> None:
    store = UserStore()
    barrier = threading.Barrier(8)

    def worker(index: int) -> None:
        barrier.wait()
        store.create(f"user-{index}", f"user{index}@example.com", 20 + index)

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 10
    assert {user.id for user in store.snapshot()} == {str(i) for i in range(1, 11)}


def _store_records(caplog, name: str = "user_service.store"):
    return [(r.getMessage(), getattr(r, "fields", None)) for r in caplog.records if r.name == name]


def test_seeding_is_logged(caplog) -> None:
    caplog.set_level(logging.INFO, logger="user_service.store")

    UserStore()

    assert _store_records(caplog) == [("Initialized sample user data", None)]


def test_operations_log_their_context(store: UserStore, caplog) -> None:
    caplog.set_level(logging.INFO, logger="user_service.store")

    store.get("1")
    store.create("A", "a@x.com", 20)
    store.update("1", "New", "", 0)
    store.delete("2")
    store.list(1, 5)

    assert _store_records(caplog) == [
        ("Getting user", {"user_id": "1"}),
        ("Creating user", {"name": "A", "email": "a@x.com", "age": 20}),
        ("Updating user", {"user_id": "1"}),
        ("Deleting user", {"user_id": "2"}),
        ("Listing users", {"page": 1, "limit": 5}),
    ]


def test_store_uses_injected_logger(caplog) -> None:
    caplog.set_level(logging.INFO, logger="tests.store")

    store = UserStore(logger=logging.getLogger("tests.store"))
    store.get("999")

    assert _store_records(caplog, "tests.store") == [
        ("Initialized sample user data", None),
        ("Getting user", {"user_id": "999"}),
    ]
    assert _store_records(caplog) == []
