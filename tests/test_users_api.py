import asyncio

import pytest

from registration.config.db_session import get_sessionmaker
from registration.config.dependencies import get_user_service
from registration.shared.metrics.metrics_schema import PublisherMetrics
from registration.users.crud import UserRepository
from registration.users.services import UserService

ADA = {"name": "Ada", "email": "ada@x.com", "age": 20}


@pytest.mark.asyncio
async def test_create_then_list(client, publisher, kafka_client):
    created = await client.post("/users", json=ADA)

    assert created.status_code == 201
    assert created.json() == {"userId": 1, "name": "Ada", "email": "ada@x.com", "age": 20}

    listed = await client.get("/users")
    assert listed.status_code == 200
    assert listed.json() == [{"userId": 1, "name": "Ada", "email": "ada@x.com", "age": 20}]

    await publisher.drain()
    kafka_client.produce.assert_awaited_once_with("welcome_queue", b"Welcome, Ada!")


@pytest.mark.asyncio
async def test_ids_increase_across_requests(client):
    ids = []
    for i in range(3):
        response = await client.post("/users", json={**ADA, "name": f"user{i}"})
        ids.append(response.json()["userId"])

    assert ids == [1, 2, 3]


@pytest.mark.asyncio
async def test_listing_contains_ada_once(client):
    await client.post("/users", json={"name": "Bob", "email": "bob@x.com", "age": 33})
    await client.post("/users", json=ADA)

    users = (await client.get("/users")).json()

    assert [u["name"] for u in users].count("Ada") == 1


@pytest.mark.asyncio
async def test_listing_is_adults_sorted_by_name(client):
    for name, age in [("Zed", 50), ("Tim", 10), ("Ada", 20), ("Max", 18)]:
        await client.post("/users", json={"name": name, "email": f"{name}@x.com", "age": age})

    users = (await client.get("/users")).json()

    names = [u["name"] for u in users]
    assert names == sorted(names) == ["Ada", "Zed"]
    assert all(u["age"] > 18 for u in users)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, field",
    [
        ({**ADA, "name": ""}, "name"),
        ({**ADA, "age": "abc"}, "age"),
        ({"name": "Ada", "age": 20}, "email"),
    ],
)
async def test_invalid_payload_is_rejected_before_store(client, repository, kafka_client, payload, field):
    response = await client.post("/users", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert [e["field"] for e in body["detail"]] == [field]
    assert await repository.find_all(min_age=None) == []
    kafka_client.produce.assert_not_awaited()


@pytest.mark.asyncio
async def test_malformed_json_is_rejected(client, repository):
    response = await client.post("/users", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert await repository.find_all(min_age=None) == []


@pytest.mark.asyncio
async def test_publish_failure_still_creates_user(client, publisher, kafka_client):
    kafka_client.produce.side_effect = ConnectionError("broker down")

    response = await client.post("/users", json=ADA)
    await publisher.drain()

    assert response.status_code == 201
    assert response.json()["name"] == "Ada"
    assert publisher.metrics.get(PublisherMetrics.FAILED) == 1
    assert len((await client.get("/users")).json()) == 1


@pytest.mark.asyncio
async def test_concurrent_creates(client, repository):
    n = 5
    responses = await asyncio.gather(
        *(client.post("/users", json={**ADA, "name": f"user{i}"}) for i in range(n))
    )

    assert all(r.status_code == 201 for r in responses)
    assert len({r.json()["userId"] for r in responses}) == n
    assert len(await repository.find_all(min_age=None)) == n


@pytest.mark.asyncio
async def test_store_failure_returns_server_error(app, client, broken_engine, publisher):
    service = UserService(repository=UserRepository(get_sessionmaker(broken_engine)), publisher=publisher)
    app.dependency_overrides[get_user_service] = lambda: service

    created = await client.post("/users", json=ADA)
    listed = await client.get("/users")

    assert created.status_code == 500
    assert created.json()["error"] == "persistence_error"
    assert listed.status_code == 500
