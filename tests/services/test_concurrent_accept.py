# tests/services/test_concurrent_accept.py
"""Two accounts racing to resolve the same contact request."""

from __future__ import annotations

import threading
from collections.abc import Iterator

import pytest
from fastapi import status
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from quietline.db.session import build_engine, create_tables
from quietline.models import Account
from quietline.models.relationship import EdgeStatus
from quietline.repositories import RelationshipRepository
from quietline.services import RelationshipService


@pytest.fixture()
def file_engine(tmp_path) -> Iterator[Engine]:
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")

    # pysqlite defers BEGIN; take the write lock up front so the second
    # writer waits for the first instead of failing with SQLITE_BUSY.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    create_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


def test_only_one_concurrent_accept_wins(file_engine, test_settings) -> None:
    factory = sessionmaker(bind=file_engine, autocommit=False, autoflush=False)
    with factory() as setup:
        alice = Account(handle="alice", shadowed=False, exact_handle_match_only=False, deleted=False)
        bob = Account(handle="bob", shadowed=False, exact_handle_match_only=False, deleted=False)
        setup.add_all([alice, bob])
        setup.commit()
        alice_id, bob_id = alice.id, bob.id
        assert RelationshipService(setup, test_settings).request(alice_id, bob_id).ok

    barrier = threading.Barrier(2)
    codes: list[int] = []
    lock = threading.Lock()

    def _accept() -> None:
        with factory() as session:
            barrier.wait(timeout=10)
            result = RelationshipService(session, test_settings).accept(bob_id, alice_id)
            with lock:
                codes.append(result.status_code)

    threads = [threading.Thread(target=_accept) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert sorted(codes) == [status.HTTP_200_OK, status.HTTP_404_NOT_FOUND]
    with factory() as check:
        assert RelationshipRepository(check).get_edge(alice_id, bob_id).status == EdgeStatus.ACCEPTED
