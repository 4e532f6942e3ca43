import asyncio

import pytest

from worldforge_client import keys
from worldforge_client.api import APIError
from worldforge_client.mutations import Mutation, WorldforgeMutations
from worldforge_client.query_cache import QueryCache, should_retry


def no_delay(attempt):
    return 0


class FakeApi:
    """Records calls; ``delete`` fails when ``fail_delete`` is set."""

    def __init__(self, fail_delete=False):
        self.fail_delete = fail_delete
        self.calls = []

    async def delete(self, endpoint, params=None):
        self.calls.append(("DELETE", endpoint, params))
        await asyncio.sleep(0)
        if self.fail_delete:
            raise APIError(403, "Insufficient permissions")
        return {"ok": True}

    async def post(self, endpoint, data=None, params=None):
        self.calls.append(("POST", endpoint, data))
        return {"ok": True}


@pytest.mark.parametrize(
    "failures, error, expected",
    [
        (1, APIError(401, "no"), False),
        (1, APIError(403, "no"), False),
        (1, APIError(500, "boom"), True),
        (3, APIError(0, "offline"), True),
        (4, APIError(500, "boom"), False),
        (2, RuntimeError("boom"), True),
    ],
)
def test_should_retry(failures, error, expected):
    assert should_retry(failures, error) is expected


def test_fetch_retries_then_succeeds():
    cache = QueryCache(delay=no_delay)
    attempts = []

    async def fetcher():
        attempts.append(1)
        if len(attempts) < 3:
            raise APIError(500, "flaky")
        return ["ok"]

    assert asyncio.run(cache.fetch(("worlds",), fetcher)) == ["ok"]
    assert len(attempts) == 3


def test_fetch_gives_up_after_three_retries():
    cache = QueryCache(delay=no_delay)
    attempts = []

    async def fetcher():
        attempts.append(1)
        raise APIError(500, "down")

    with pytest.raises(APIError):
        asyncio.run(cache.fetch(("worlds",), fetcher))
    assert len(attempts) == 4


def test_fetch_does_not_retry_auth_errors():
    cache = QueryCache(delay=no_delay)
    attempts = []

    async def fetcher():
        attempts.append(1)
        raise APIError(401, "expired")

    with pytest.raises(APIError):
        asyncio.run(cache.fetch(("profile",), fetcher))
    assert len(attempts) == 1


def test_concurrent_fetches_share_one_request():
    cache = QueryCache(delay=no_delay)
    calls = []

    async def fetcher():
        calls.append(1)
        await asyncio.sleep(0.01)
        return {"id": "w1"}

    async def scenario():
        return await asyncio.gather(cache.fetch(("world", "w1"), fetcher), cache.fetch(("world", "w1"), fetcher))

    assert asyncio.run(scenario()) == [{"id": "w1"}, {"id": "w1"}]
    assert len(calls) == 1


def test_invalidate_by_prefix_forces_refetch():
    cache = QueryCache(delay=no_delay)
    cache.set_data(("world-entities", "w1"), [1])
    cache.set_data(("world-entities", "w2"), [2])
    cache.set_data(("world-folders", "w1"), [3])

    assert cache.invalidate(("world-entities",)) == 2
    assert cache.is_stale(("world-entities", "w1"))
    assert cache.is_stale(("world-entities", "w2"))
    assert not cache.is_stale(("world-folders", "w1"))

    async def fetcher():
        return [9]

    assert asyncio.run(cache.fetch(("world-entities", "w1"), fetcher)) == [9]
    assert asyncio.run(cache.fetch(("world-folders", "w1"), fetcher)) == [3]


def test_mutation_invalidates_even_on_failure():
    cache = QueryCache()
    cache.set_data(("worlds",), [])

    async def fail(variables):
        raise APIError(500, "nope")

    mutation = Mutation(cache, fail, lambda v: [("worlds",)])
    with pytest.raises(APIError):
        asyncio.run(mutation.execute({}))

    assert cache.is_stale(("worlds",))


ENTITIES = [{"id": "e1", "name": "Mira"}, {"id": "e2", "name": "Oren"}]


def test_optimistic_delete_removes_entity_immediately():
    api, cache = FakeApi(), QueryCache()
    cache.set_data(keys.world_entities("w1"), list(ENTITIES))
    seen_during_request = []

    async def delete(endpoint, params=None):
        seen_during_request.append(cache.get_data(keys.world_entities("w1")))
        return {"ok": True}

    api.delete = delete
    mutation = WorldforgeMutations(api, cache).delete_entity()
    asyncio.run(mutation.execute({"world_id": "w1", "entity_id": "e1"}))

    assert seen_during_request == [[{"id": "e2", "name": "Oren"}]]
    assert cache.is_stale(keys.world_entities("w1"))


def test_optimistic_delete_rolls_back_on_error():
    api, cache = FakeApi(fail_delete=True), QueryCache()
    cache.set_data(keys.world_entities("w1"), list(ENTITIES))
    cache.set_data(keys.world_folders("w1"), [{"id": "f1", "count": 2}])

    mutation = WorldforgeMutations(api, cache).delete_entity()
    with pytest.raises(APIError):
        asyncio.run(mutation.execute({"world_id": "w1", "entity_id": "e1"}))

    assert cache.get_data(keys.world_entities("w1")) == ENTITIES
    assert cache.is_stale(keys.world_entities("w1"))
    assert cache.is_stale(keys.world_folders("w1"))
    assert api.calls == [("DELETE", "/entities/e1", None)]


def test_optimistic_delete_cancels_inflight_list_fetch():
    api, cache = FakeApi(), QueryCache()
    cache.set_data(keys.world_entities("w1"), list(ENTITIES))
    cache.invalidate(keys.world_entities("w1"))

    async def slow_fetch():
        await asyncio.sleep(1)
        return list(ENTITIES)

    async def scenario():
        reader = asyncio.ensure_future(cache.fetch(keys.world_entities("w1"), slow_fetch))
        await asyncio.sleep(0)
        assert cache.is_fetching(keys.world_entities("w1"))

        await WorldforgeMutations(api, cache).delete_entity().execute({"world_id": "w1", "entity_id": "e1"})

        assert not cache.is_fetching(keys.world_entities("w1"))
        with pytest.raises(asyncio.CancelledError):
            await reader

    asyncio.run(scenario())
    assert cache.get_data(keys.world_entities("w1")) == [{"id": "e2", "name": "Oren"}]


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = str(body)

    def json(self):
        return self._body


class FakeHttpSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def request(self, method, url, headers=None, **kwargs):
        self.requests.append((method, url, headers, kwargs))
        return self.response


def test_api_client_sends_bearer_token_and_reads_errors():
    from worldforge_client.api import ApiClient
    from worldforge_client.state import ClientState

    session = FakeHttpSession(FakeResponse(403, {"error": "Insufficient permissions", "requestId": "r1"}))
    api = ApiClient("http://localhost:8000/api/", ClientState(access_token="tok"), session=session)

    with pytest.raises(APIError) as excinfo:
        asyncio.run(api.delete("/entities/e1"))

    method, url, headers, _ = session.requests[0]
    assert (method, url) == ("DELETE", "http://localhost:8000/api/entities/e1")
    assert headers["Authorization"] == "Bearer tok"
    assert excinfo.value.status_code == 403
    assert excinfo.value.detail == "Insufficient permissions"


def test_queries_unwrap_and_cache():
    from worldforge_client.queries import WorldforgeQueries

    class ListingApi:
        def __init__(self):
            self.calls = 0

        async def get(self, endpoint, params=None):
            self.calls += 1
            return {"entities": [{"id": "e1"}]}

    api, cache = ListingApi(), QueryCache()
    queries = WorldforgeQueries(api, cache)

    assert asyncio.run(queries.entities("w1")) == [{"id": "e1"}]
    assert asyncio.run(queries.entities("w1")) == [{"id": "e1"}]
    assert api.calls == 1

    cache.invalidate(keys.world_entities("w1"))
    asyncio.run(queries.entities("w1"))
    assert api.calls == 2
