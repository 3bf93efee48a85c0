"""
写事务封装 unit_of_work 测试
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from healthapp.errors import ConflictError, NotFoundError, PersistenceError
from healthapp.models import BillboardRecord
from healthapp.utils import unit_of_work


def _billboard_row(rank):
    return BillboardRecord(song_title="Song", artist="Artist", chart_rank=rank, star_number=1)


class TestUnitOfWork:
    """提交、回滚与异常转换"""

    def test_commits_on_success(self, db_session):
        with unit_of_work(db_session, "test"):
            db_session.add(_billboard_row(1))

        db_session.rollback()
        assert db_session.query(BillboardRecord).count() == 1

    def test_business_error_rolls_back_and_propagates(self, db_session):
        with pytest.raises(NotFoundError):
            with unit_of_work(db_session, "test"):
                db_session.add(_billboard_row(1))
                db_session.flush()
                raise NotFoundError("Record not found")

        assert db_session.query(BillboardRecord).count() == 0

    def test_database_error_inside_block_becomes_persistence_error(self, db_session):
        with pytest.raises(PersistenceError) as exc_info:
            with unit_of_work(db_session, "test"):
                raise OperationalError("UPDATE", {}, Exception("server has gone away"))

        assert exc_info.value.message == "Database error"
        assert exc_info.value.status_code == 500

    def test_integrity_error_uses_callback(self, db_session):
        with pytest.raises(ConflictError):
            with unit_of_work(db_session, "test", on_integrity=lambda e: ConflictError("Duplicate rank")):
                db_session.add(_billboard_row(1))
                db_session.add(_billboard_row(1))
                db_session.flush()

        assert db_session.query(BillboardRecord).count() == 0

    def test_integrity_error_without_callback(self, db_session):
        with pytest.raises(PersistenceError):
            with unit_of_work(db_session, "test"):
                raise IntegrityError("INSERT", {}, Exception("duplicate key"))
