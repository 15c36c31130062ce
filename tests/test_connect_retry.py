from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from saas_platform.db import session as session_module
from saas_platform.db.session import connect_with_retry


def _down() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.fixture
def recorded_sleeps(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(session_module.asyncio, "sleep", fake_sleep)
    return delays


async def test_transient_failures_are_retried_with_backoff(recorded_sleeps):
    session = AsyncMock()
    session.connection.side_effect = [_down(), _down(), None]

    await connect_with_retry(session, max_attempts=5, base_delay=1.0, max_delay=30.0)

    assert session.connection.await_count == 3
    assert session.rollback.await_count == 2
    assert recorded_sleeps == [1.0, 2.0]


async def test_backoff_is_capped(recorded_sleeps):
    session = AsyncMock()
    session.connection.side_effect = [_down(), _down(), _down(), _down(), None]

    await connect_with_retry(session, max_attempts=5, base_delay=10.0, max_delay=30.0)

    assert recorded_sleeps == [10.0, 20.0, 30.0, 30.0]


async def test_gives_up_after_max_attempts(recorded_sleeps):
    session = AsyncMock()
    session.connection.side_effect = _down()

    with pytest.raises(OperationalError):
        await connect_with_retry(session, max_attempts=3, base_delay=0.5, max_delay=30.0)

    assert session.connection.await_count == 3
    assert len(recorded_sleeps) == 2


async def test_non_transient_errors_are_not_retried(recorded_sleeps):
    session = AsyncMock()
    session.connection.side_effect = ValueError("bad configuration")

    with pytest.raises(ValueError):
        await connect_with_retry(session, max_attempts=5, base_delay=0.5, max_delay=30.0)

    assert session.connection.await_count == 1
    assert recorded_sleeps == []
