import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_get_doctors_empty(client: AsyncClient):
    """Empty list when no doctors exist"""
    response = await client.get("/api/doctors")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"] == []
    assert body["path"] == "/api/doctors"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_get_doctors_ordered_by_incarnation(client: AsyncClient, seeded):
    response = await client.get("/api/doctors")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [d["incarnation_number"] for d in data] == [9, 10]
    assert data[1]["actor"]["name"] == "David Tennant"
    assert data[1]["first_episode"]["title"] == "Rose"
    assert data[1]["last_episode"]["title"] == "The Parting of the Ways"


@pytest.mark.asyncio
async def test_create_doctor_then_read_back(client: AsyncClient, actor_id):
    """Created doctor reads back with the same incarnation and catchphrase"""
    payload = {
        "incarnation_number": 12,
        "actor_id": actor_id,
        "catchphrase": "Shut up!",
    }
    response = await client.post("/api/doctors", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Resource created successfully"
    doctor_id = body["data"]["doctor_id"]
    assert body["data"]["actor"]["name"] == "Peter Capaldi"

    response = await client.get(f"/api/doctors/{doctor_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["incarnation_number"] == 12
    assert data["catchphrase"] == "Shut up!"
    assert data["first_episode"] is None


@pytest.mark.asyncio
async def test_create_doctor_missing_actor(client: AsyncClient):
    response = await client.post("/api/doctors", json={"incarnation_number": 12})
    assert response.status_code == 422
    body = response.json()
    assert body["status"] == "error"
    assert body["statusCode"] == 422
    assert body["message"] == "Validation failed"
    assert any(error["field"] == "actor_id" for error in body["errors"])


@pytest.mark.asyncio
async def test_create_doctor_rejects_non_positive_incarnation(
    client: AsyncClient, actor_id
):
    response = await client.post(
        "/api/doctors", json={"incarnation_number": 0, "actor_id": actor_id}
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "incarnation_number"


@pytest.mark.asyncio
async def test_create_duplicate_incarnation(client: AsyncClient, seeded, actor_id):
    """Incarnation numbers are unique"""
    response = await client.post(
        "/api/doctors", json={"incarnation_number": 10, "actor_id": actor_id}
    )
    assert response.status_code == 409
    assert response.json()["message"] == "A record with this value already exists"


@pytest.mark.asyncio
async def test_update_doctor_partial(client: AsyncClient, seeded):
    """Only the supplied fields change"""
    response = await client.put(
        f"/api/doctors/{seeded['tenth']}", json={"catchphrase": "Molto bene!"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Resource updated successfully"
    assert body["data"]["catchphrase"] == "Molto bene!"
    assert body["data"]["incarnation_number"] == 10
    assert body["data"]["first_episode_id"] == seeded["rose"]


@pytest.mark.asyncio
async def test_update_doctor_rejects_null_incarnation(client: AsyncClient, seeded):
    response = await client.put(
        f"/api/doctors/{seeded['tenth']}", json={"incarnation_number": None}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_missing_doctor(client: AsyncClient):
    response = await client.put("/api/doctors/9999", json={"catchphrase": "Hello"})
    assert response.status_code == 404
    assert response.json()["message"] == "Doctor not found"


@pytest.mark.asyncio
async def test_delete_doctor_twice(client: AsyncClient, actor_id):
    """Second delete of the same id is a 404"""
    created = await client.post(
        "/api/doctors", json={"incarnation_number": 14, "actor_id": actor_id}
    )
    doctor_id = created.json()["data"]["doctor_id"]

    response = await client.delete(f"/api/doctors/{doctor_id}")
    assert response.status_code == 204
    assert response.content == b""

    response = await client.delete(f"/api/doctors/{doctor_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_missing_doctor(client: AsyncClient):
    response = await client.get("/api/doctors/9999")
    assert response.status_code == 404
    body = response.json()
    assert body["message"] == "Doctor not found"
    assert body["path"] == "/api/doctors/9999"


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["0", "-3", "abc"])
async def test_malformed_doctor_id(client: AsyncClient, bad_id):
    """Malformed path parameters are a bad request, not a validation failure"""
    response = await client.get(f"/api/doctors/{bad_id}")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid id parameter"
