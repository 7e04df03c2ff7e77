"""
Tests for the record store transaction boundary and engine configuration.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from app.core.database import engine_options
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    StoreTimeoutError,
)
from app.crud.store import is_timeout
from app.models.person import Person
from app.services import lifecycle
from app.services.query import PERSON_QUERY, PageRequest


class TestEngineOptions:
    """Every store call is time-bounded"""

    def test_sqlite_busy_timeout(self):
        options = engine_options("sqlite:///./alumni.db", 5.0)
        assert options["connect_args"]["timeout"] == 5.0
        assert options["connect_args"]["check_same_thread"] is False

    def test_postgres_statement_timeout(self):
        options = engine_options("postgresql://u:p@localhost:5432/alumni_db", 2.5)
        assert "statement_timeout=2500" in options["connect_args"]["options"]
        assert "lock_timeout=2500" in options["connect_args"]["options"]
        assert options["pool_pre_ping"] is True


class TestTimeoutDetection:

    @pytest.mark.parametrize("message", [
        "canceling statement due to statement timeout",
        "canceling statement due to lock timeout",
        "database is locked",
    ])
    def test_timeout_messages(self, message):
        assert is_timeout(OperationalError("SELECT 1", {}, Exception(message)))

    def test_other_operational_errors(self):
        assert not is_timeout(OperationalError("SELECT 1", {}, Exception("no such table: persons")))


class TestTransaction:
    """store.transaction() commits on success and maps failures to typed errors"""

    def test_commit_on_success(self, db_session, store, make_person):
        person = make_person()

        with store.transaction():
            person.name = "Committed"

        db_session.expire_all()
        assert db_session.query(Person).filter(Person.id == person.id).one().name == "Committed"

    def test_domain_errors_roll_back_and_propagate(self, db_session, store, make_person):
        person = make_person(name="Original")

        with pytest.raises(NotFoundError):
            with store.transaction():
                person.name = "Changed"
                db_session.flush()
                raise NotFoundError("gone")

        db_session.expire_all()
        assert db_session.query(Person).filter(Person.id == person.id).one().name == "Original"

    def test_integrity_error_is_conflict(self, store):
        with pytest.raises(ConflictError):
            with store.transaction():
                raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    def test_timeout_is_store_timeout(self, store):
        with pytest.raises(StoreTimeoutError):
            with store.transaction():
                raise OperationalError("UPDATE", {}, Exception("canceling statement due to statement timeout"))

    def test_other_operational_error_is_store_error(self, store):
        with pytest.raises(StoreError):
            with store.transaction():
                raise OperationalError("UPDATE", {}, Exception("server closed the connection unexpectedly"))

    def test_unclassified_failures_are_store_errors(self, store):
        with pytest.raises(StoreError):
            with store.transaction():
                raise SQLAlchemyError("boom")
        with pytest.raises(StoreError):
            with store.transaction():
                raise RuntimeError("process interrupted")


def statement_timeout(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("canceling statement due to statement timeout"))


class TestReading:
    """store.reading() gives reads the same typed failures as writes"""

    def test_timeout_is_store_timeout(self, store):
        with pytest.raises(StoreTimeoutError):
            with store.reading():
                raise OperationalError("SELECT", {}, Exception("canceling statement due to statement timeout"))

    def test_driver_error_is_store_error(self, store):
        with pytest.raises(StoreError):
            with store.reading():
                raise SQLAlchemyError("connection reset")

    def test_domain_errors_propagate(self, store):
        with pytest.raises(NotFoundError):
            with store.reading():
                raise NotFoundError("gone")

    def test_reads_do_not_commit(self, db_session, store, make_person):
        person = make_person(name="Original")

        with store.reading():
            person.name = "Uncommitted"
        db_session.rollback()

        assert db_session.query(Person).filter(Person.id == person.id).one().name == "Original"

    def test_get_person_timeout(self, db_session, store, make_person, monkeypatch):
        person = make_person()
        monkeypatch.setattr(db_session, "query", statement_timeout)

        with pytest.raises(StoreTimeoutError):
            lifecycle.get_person(store, person.id)

    def test_list_persons_timeout(self, db_session, store, admin_actor, monkeypatch):
        monkeypatch.setattr(db_session, "query", statement_timeout)

        with pytest.raises(StoreTimeoutError):
            lifecycle.list_persons(store, admin_actor, PageRequest.normalize(PERSON_QUERY))

    def test_engagement_reads_timeout(self, db_session, store, admin_actor, monkeypatch):
        monkeypatch.setattr(db_session, "query", statement_timeout)

        with pytest.raises(StoreTimeoutError):
            lifecycle.get_engagement(store, 1)
        with pytest.raises(StoreTimeoutError):
            lifecycle.list_trash(store, admin_actor)
        with pytest.raises(StoreTimeoutError):
            lifecycle.list_long_tenure(store, admin_actor)
