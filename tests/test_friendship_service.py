"""Service-level tests for the mirrored friendship graph."""
from __future__ import annotations

import os
import uuid
from typing import Callable, Iterator

import pytest
from sqlalchemy import delete, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_friendline.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from friendline.database import Base, SessionLocal, engine  # noqa: E402
from friendline.models import FriendEdge, Notification, User  # noqa: E402
from friendline.services import (  # noqa: E402
    DuplicateRelationshipError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    PartialWriteFailure,
    list_edges,
    remove,
    respond,
    send_request,
)
from friendline.services import friendship_service  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if engine.url.get_backend_name() == "sqlite" and engine.url.database and os.path.exists(engine.url.database):
        os.remove(engine.url.database)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(Notification))
        session.execute(delete(FriendEdge))
        session.execute(delete(User))
        session.commit()
    yield


@pytest.fixture
def db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_factory() -> Callable[[str], User]:
    def _factory(username: str) -> User:
        with SessionLocal() as session:
            user = User(username=username, hashed_password="test-hash")
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
    return _factory


def _edges(account_id: uuid.UUID) -> list[FriendEdge]:
    with SessionLocal() as session:
        return list(session.scalars(select(FriendEdge).where(FriendEdge.account_id == account_id)))


def _assert_mirrored(a: User, b: User) -> None:
    a_side = [edge for edge in _edges(a.id) if edge.peer_id == b.id]
    b_side = [edge for edge in _edges(b.id) if edge.peer_id == a.id]
    assert len(a_side) == len(b_side)
    assert len(a_side) <= 1
    if a_side:
        assert a_side[0].mirrors(b_side[0])


def test_request_accept_remove_scenario(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    edge = send_request(db, from_id=alice.id, to_id=bob.id)
    assert edge.status == "pending"
    assert edge.peer_id == bob.id

    (alice_edge,) = _edges(alice.id)
    (bob_edge,) = _edges(bob.id)
    assert alice_edge.peer_id == bob.id
    assert bob_edge.peer_id == alice.id
    assert alice_edge.initiator_id == alice.id
    assert bob_edge.initiator_id == alice.id
    assert bob_edge.status == "pending"

    respond(db, user_id=bob.id, peer_id=alice.id, new_status="accepted")
    assert [edge.status for edge in _edges(alice.id)] == ["accepted"]
    assert [edge.status for edge in _edges(bob.id)] == ["accepted"]

    assert remove(db, user_id=alice.id, peer_id=bob.id) == 2
    assert _edges(alice.id) == []
    assert _edges(bob.id) == []


def test_duplicate_requests_are_rejected_in_both_directions(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_request(db, from_id=alice.id, to_id=bob.id)

    with pytest.raises(DuplicateRelationshipError):
        send_request(db, from_id=alice.id, to_id=bob.id)
    with pytest.raises(DuplicateRelationshipError):
        send_request(db, from_id=bob.id, to_id=alice.id)

    assert len(_edges(alice.id)) == 1
    assert len(_edges(bob.id)) == 1
    assert _edges(bob.id)[0].initiator_id == alice.id


def test_self_request_is_invalid(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(InvalidInputError):
        send_request(db, from_id=alice.id, to_id=alice.id)
    assert _edges(alice.id) == []


def test_request_to_unknown_account_is_not_found(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(NotFoundError):
        send_request(db, from_id=alice.id, to_id=uuid.uuid4())
    assert _edges(alice.id) == []


def test_initiator_may_settle_their_own_request(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_request(db, from_id=alice.id, to_id=bob.id)

    edge = respond(db, user_id=alice.id, peer_id=bob.id, new_status="accepted")

    assert edge.status == "accepted"
    _assert_mirrored(alice, bob)


@pytest.mark.parametrize("value", ["pending", "friends", ""])
def test_respond_rejects_unknown_statuses(db, user_factory, value):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_request(db, from_id=alice.id, to_id=bob.id)

    with pytest.raises(InvalidInputError):
        respond(db, user_id=bob.id, peer_id=alice.id, new_status=value)
    assert [edge.status for edge in _edges(bob.id)] == ["pending"]


def test_respond_without_edge_is_not_found(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    with pytest.raises(NotFoundError):
        respond(db, user_id=bob.id, peer_id=alice.id, new_status="accepted")


def test_settled_edges_do_not_change_status(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_request(db, from_id=alice.id, to_id=bob.id)
    respond(db, user_id=bob.id, peer_id=alice.id, new_status="rejected")

    repeated = respond(db, user_id=bob.id, peer_id=alice.id, new_status="rejected")
    assert repeated.status == "rejected"

    with pytest.raises(InvalidTransitionError):
        respond(db, user_id=bob.id, peer_id=alice.id, new_status="accepted")
    assert [edge.status for edge in _edges(alice.id)] == ["rejected"]
    _assert_mirrored(alice, bob)


def test_remove_is_idempotent_but_requires_accounts(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_request(db, from_id=alice.id, to_id=bob.id)

    assert remove(db, user_id=bob.id, peer_id=alice.id) == 2
    assert remove(db, user_id=bob.id, peer_id=alice.id) == 0
    with pytest.raises(NotFoundError):
        remove(db, user_id=bob.id, peer_id=uuid.uuid4())


def test_list_edges_resolves_peers_and_filters(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    send_request(db, from_id=alice.id, to_id=bob.id)
    send_request(db, from_id=carol.id, to_id=alice.id)
    respond(db, user_id=alice.id, peer_id=carol.id, new_status="accepted")

    edges = list_edges(db, user_id=alice.id)
    assert [edge.peer.username for edge in edges] == ["bob", "carol"]

    accepted = list_edges(db, user_id=alice.id, status_filter="accepted")
    assert [edge.peer.username for edge in accepted] == ["carol"]

    with pytest.raises(InvalidInputError):
        list_edges(db, user_id=alice.id, status_filter="blocked")
    with pytest.raises(NotFoundError):
        list_edges(db, user_id=uuid.uuid4())


def test_edges_stay_mirrored_across_operation_sequence(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    steps = [
        lambda: send_request(db, from_id=alice.id, to_id=bob.id),
        lambda: respond(db, user_id=bob.id, peer_id=alice.id, new_status="rejected"),
        lambda: remove(db, user_id=alice.id, peer_id=bob.id),
        lambda: send_request(db, from_id=bob.id, to_id=alice.id),
        lambda: respond(db, user_id=alice.id, peer_id=bob.id, new_status="accepted"),
    ]
    for step in steps:
        step()
        _assert_mirrored(alice, bob)

    (alice_edge,) = _edges(alice.id)
    assert alice_edge.status == "accepted"
    assert alice_edge.initiator_id == bob.id


def test_failed_mirror_write_leaves_no_edges(db, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")

    real_flush = db.flush
    calls = {"count": 0}

    def flaky_flush(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise OperationalError("INSERT INTO friend_edges", {}, Exception("disk I/O error"))
        return real_flush(*args, **kwargs)

    monkeypatch.setattr(db, "flush", flaky_flush)
    with pytest.raises(PartialWriteFailure):
        send_request(db, from_id=alice.id, to_id=bob.id)
    monkeypatch.undo()

    assert _edges(alice.id) == []
    assert _edges(bob.id) == []

    send_request(db, from_id=alice.id, to_id=bob.id)
    _assert_mirrored(alice, bob)


def test_concurrent_reverse_request_is_reported_as_duplicate(db, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")

    # Bob's request lands after Alice's pre-check has already found nothing.
    with SessionLocal() as other:
        send_request(other, from_id=bob.id, to_id=alice.id)
    monkeypatch.setattr(friendship_service, "_find_edge", lambda *args: None)

    with pytest.raises(DuplicateRelationshipError):
        send_request(db, from_id=alice.id, to_id=bob.id)
    monkeypatch.undo()

    (alice_edge,) = _edges(alice.id)
    (bob_edge,) = _edges(bob.id)
    assert alice_edge.initiator_id == bob.id
    assert bob_edge.initiator_id == bob.id
    assert alice_edge.status == bob_edge.status == "pending"
    _assert_mirrored(alice, bob)


def test_request_and_acceptance_notify_the_other_side(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_request(db, from_id=alice.id, to_id=bob.id)
    respond(db, user_id=bob.id, peer_id=alice.id, new_status="accepted")

    with SessionLocal() as session:
        bob_types = [n.type for n in session.scalars(select(Notification).where(Notification.recipient_id == bob.id))]
        alice_types = [n.type for n in session.scalars(select(Notification).where(Notification.recipient_id == alice.id))]
    assert bob_types == ["friend.request"]
    assert alice_types == ["friend.accepted"]
