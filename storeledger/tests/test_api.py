import pytest
from fastapi.testclient import TestClient

from storeledger.app.api.deps import get_db
from storeledger.app.main import app


@pytest.fixture
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def stocked(project, material, allocate, receive):
    allocate(project, material, 100)
    receive(project, material, 60)
    return project, material


def test_codes_preview(client):
    response = client.get("/v1/inventory/codes")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"inward_code", "outward_code", "transfer_code"}
    assert body["inward_code"].startswith("INW-")


def test_inward_over_allocation_maps_to_400(client, project, material, allocate):
    allocate(project, material, 10)

    response = client.post(
        "/v1/inwards",
        json={"project_id": project.id, "lines": [{"material_id": material.id, "received_qty": "11"}]},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["kind"] == "ALLOCATION_EXCEEDED"
    assert detail["material"] == "MAT-M"
    assert detail["allocation"] == 10.0


def test_outward_create_read_and_replace(client, stocked):
    project, material = stocked

    created = client.post(
        "/v1/outwards",
        json={"project_id": project.id, "issue_to": "Crew 1", "lines": [{"material_id": material.id, "issue_qty": 15}]},
    )
    assert created.status_code == 200
    register = created.json()
    assert register["status"] == "OPEN"
    assert register["lines"][0]["issue_qty"] == 15.0

    fetched = client.get(f"/v1/outwards/{register['id']}")
    assert fetched.json()["issue_to"] == "Crew 1"

    replaced = client.put(
        f"/v1/outwards/{register['id']}",
        json={"status": "CLOSED", "lines": [{"line_id": register["lines"][0]["id"], "material_id": material.id, "issue_qty": 12}]},
    )
    assert replaced.status_code == 200
    assert replaced.json()["status"] == "CLOSED"
    assert replaced.json()["lines"][0]["issue_qty"] == 12.0

    locked = client.put(f"/v1/outwards/{register['id']}", json={"lines": []})
    assert locked.status_code == 409
    assert locked.json()["detail"]["kind"] == "CLOSED_REGISTER"


def test_missing_register_is_404(client):
    read = client.get("/v1/outwards/999")
    replace = client.put("/v1/outwards/999", json={"lines": []})

    assert read.status_code == 404
    assert replace.status_code == 404
    assert read.json()["detail"] == replace.json()["detail"]
    assert read.json()["detail"]["kind"] == "NOT_FOUND"
    assert read.json()["detail"]["register_id"] == 999


def test_transfer_endpoint(client, stocked, make_project, allocate):
    project, material = stocked
    destination = make_project("PRJ-B")
    allocate(destination, material, 50)

    response = client.post(
        "/v1/transfers",
        json={
            "from_project_id": project.id,
            "to_project_id": destination.id,
            "lines": [{"material_id": material.id, "transfer_qty": 5}],
        },
    )

    assert response.status_code == 201
    assert response.json()["to_project_id"] == destination.id


def test_material_movements(client, stocked):
    project, material = stocked
    client.post(
        "/v1/outwards",
        json={"project_id": project.id, "lines": [{"material_id": material.id, "issue_qty": 3}]},
    )

    response = client.get(f"/v1/materials/{material.id}/movements", params={"project_id": project.id})

    assert response.status_code == 200
    body = response.json()
    assert len(body["inwards"]) == 1
    assert len(body["outwards"]) == 1
    assert body["inwards"][0]["type"] == "SUPPLY"

    assert client.get("/v1/materials/999/movements").status_code == 404
