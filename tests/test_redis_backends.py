import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from guardbot.application.errors import StoreUnavailable
from guardbot.infrastructure.config import RedisConfigStore, RedisFloodState
from guardbot.infrastructure.config.redis_store import INCREMENT_SCRIPT


@pytest.fixture()
def client():
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    client.register_script.return_value = AsyncMock(return_value=1)
    return client


@pytest.fixture()
def pipe():
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 1, 4, True])
    return pipe


@pytest.mark.asyncio
async def test_values_are_decoded(client):
    store = RedisConfigStore(client)
    client.get.side_effect = ["1", "8", "Правила".encode(), None]

    assert await store.get_bool("antilink:-1", False) is True
    assert await store.get_int("flood_limit:-1", 6) == 8
    assert await store.get_text("rules:-1") == "Правила"
    assert await store.get_int("flood_window:-1", 10) == 10


@pytest.mark.asyncio
async def test_values_are_encoded(client):
    store = RedisConfigStore(client)

    await store.set_bool("antilink:-1", False)
    await store.set_int("flood_limit:-1", 8)
    await store.delete("rules:-1")

    assert [call.args for call in client.set.await_args_list] == [
        ("antilink:-1", "0"),
        ("flood_limit:-1", "8"),
    ]
    client.delete.assert_awaited_once_with("rules:-1")


@pytest.mark.asyncio
async def test_increment_runs_script(client):
    script = client.register_script.return_value
    script.return_value = 3
    store = RedisConfigStore(client)

    assert await store.increment("warn:-1:5", 99) == 3
    client.register_script.assert_called_once_with(INCREMENT_SCRIPT)
    script.assert_awaited_once_with(keys=["warn:-1:5"], args=[99])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [RedisConnectionError("connection refused"), OSError("network down"), asyncio.TimeoutError()],
)
async def test_errors_become_store_unavailable(client, error):
    client.get.side_effect = error
    store = RedisConfigStore(client)

    with pytest.raises(StoreUnavailable):
        await store.get_bool("antilink:-1", False)


@pytest.mark.asyncio
async def test_increment_error_becomes_store_unavailable(client):
    client.register_script.return_value.side_effect = RedisConnectionError("gone")

    with pytest.raises(StoreUnavailable):
        await RedisConfigStore(client).increment("warn:-1:5", 99)


@pytest.mark.asyncio
async def test_close_uses_aclose(client):
    await RedisConfigStore(client).close()

    client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_flood_hit_evicts_and_counts(client, pipe):
    client.pipeline.return_value = pipe
    state = RedisFloodState(client)

    assert await state.hit("-1:20", 1000.0, 10) == 4

    client.pipeline.assert_called_once_with(transaction=True)
    pipe.zremrangebyscore.assert_called_once_with("flood:-1:20", "-inf", "(990.0")
    key, mapping = pipe.zadd.call_args.args
    assert key == "flood:-1:20"
    assert list(mapping.values()) == [1000.0]
    pipe.zcard.assert_called_once_with("flood:-1:20")
    pipe.expire.assert_called_once_with("flood:-1:20", 11)


@pytest.mark.asyncio
async def test_flood_members_are_unique(client, pipe):
    client.pipeline.return_value = pipe
    state = RedisFloodState(client)

    await state.hit("k", 5.0, 10)
    await state.hit("k", 5.0, 10)

    first, second = [call.args[1] for call in pipe.zadd.call_args_list]
    assert first.keys() != second.keys()


@pytest.mark.asyncio
async def test_flood_error_becomes_store_unavailable(client, pipe):
    pipe.execute.side_effect = RedisConnectionError("gone")
    client.pipeline.return_value = pipe

    with pytest.raises(StoreUnavailable):
        await RedisFloodState(client).hit("k", 5.0, 10)
