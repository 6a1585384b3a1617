import pytest
from sqlalchemy import text

from washdesk_shared import db


def test_engine_is_cached_until_disposed():
    engine = db.get_engine()
    assert db.get_engine() is engine

    db.dispose_engine()
    assert db.get_engine() is not engine


def test_transaction_commits_on_success():
    with db.transaction() as connection:
        connection.execute(text("CREATE TABLE notes (body TEXT)"))
        connection.execute(text("INSERT INTO notes VALUES ('kept')"))

    with db.transaction() as connection:
        rows = connection.execute(text("SELECT body FROM notes")).scalars().all()
    assert rows == ["kept"]


def test_transaction_rolls_back_on_error():
    with db.transaction() as connection:
        connection.execute(text("CREATE TABLE notes (body TEXT)"))

    with pytest.raises(RuntimeError):
        with db.transaction() as connection:
            connection.execute(text("INSERT INTO notes VALUES ('dropped')"))
            raise RuntimeError("abort")

    with db.transaction() as connection:
        count = connection.execute(text("SELECT COUNT(*) FROM notes")).scalar()
    assert count == 0
