import asyncio

from app.infrastructure.external.session_store.redis_session_store import (
    RedisSessionStore,
)


def test_create_stores_user_under_auth_key_with_ttl(redis_client) -> None:
    store = RedisSessionStore(redis_client, ttl_seconds=86400)

    token = asyncio.run(store.create("user-1"))

    assert redis_client.client.values[f"auth_{token}"] == "user-1"
    assert redis_client.client.expires[f"auth_{token}"] == 86400
    assert asyncio.run(store.resolve(token)) == "user-1"


def test_resolve_unknown_or_empty_token(redis_client) -> None:
    store = RedisSessionStore(redis_client)

    assert asyncio.run(store.resolve("unknown")) is None
    assert asyncio.run(store.resolve("")) is None


def test_revoke_is_idempotent(redis_client) -> None:
    store = RedisSessionStore(redis_client)
    token = asyncio.run(store.create("user-1"))

    asyncio.run(store.revoke(token))
    asyncio.run(store.revoke(token))

    assert asyncio.run(store.resolve(token)) is None


def test_tokens_are_unique(redis_client) -> None:
    store = RedisSessionStore(redis_client)

    tokens = {asyncio.run(store.create("user-1")) for _ in range(20)}

    assert len(tokens) == 20
