from fastapi.testclient import TestClient
from sqlmodel import Session, func, select

from brackets.models.group import Group
from brackets.models.team import Team


def _create_tournament(client: TestClient, name="Spring Cup") -> dict:
    response = client.post("/api/tournaments", json={"name": name})
    assert response.status_code == 201
    return response.json()


def test_create_tournament(client: TestClient):
    tournament = _create_tournament(client, "  Spring Cup  ")

    assert tournament["name"] == "Spring Cup"
    assert tournament["id"]
    assert "created_at" in tournament


def test_tournament_name_required(client: TestClient):
    response = client.post("/api/tournaments", json={"name": "   "})

    assert response.status_code == 422


def test_get_tournament(client: TestClient):
    created = _create_tournament(client)

    response = client.get(f"/api/tournaments/{created['id']}")

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_get_missing_tournament_returns_404(client: TestClient):
    response = client.get("/api/tournaments/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Tournament not found"


def test_list_tournaments(client: TestClient):
    first = _create_tournament(client, "A")
    second = _create_tournament(client, "B")

    response = client.get("/api/tournaments")

    assert response.status_code == 200
    ids = {t["id"] for t in response.json()}
    assert ids == {first["id"], second["id"]}


def test_health(client: TestClient):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_update_tournament(client: TestClient):
    created = _create_tournament(client, "Spring Cup")

    response = client.put(f"/api/tournaments/{created['id']}", json={"name": "  Summer Cup "})

    assert response.status_code == 200
    assert response.json()["name"] == "Summer Cup"
    assert client.get(f"/api/tournaments/{created['id']}").json()["name"] == "Summer Cup"


def test_update_tournament_rejects_empty_name(client: TestClient):
    created = _create_tournament(client)

    response = client.put(f"/api/tournaments/{created['id']}", json={"name": " "})

    assert response.status_code == 422


def test_update_missing_tournament_returns_404(client: TestClient):
    response = client.put("/api/tournaments/does-not-exist", json={"name": "X"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Tournament not found"


def test_delete_tournament_removes_groups_teams_and_matches(client: TestClient):
    created = _create_tournament(client)
    group = client.post(f"/api/tournaments/{created['id']}/groups", json={"name": "Main"}).json()
    teams_url = f"/api/tournaments/{created['id']}/groups/{group['id']}/teams"
    for i in range(32):
        assert client.post(teams_url, json={"name": f"Team {i + 1}"}).status_code == 201
    assert client.get(f"/api/matches/{created['id']}_WR1M0").status_code == 200

    response = client.delete(f"/api/tournaments/{created['id']}")

    assert response.status_code == 204
    assert client.get(f"/api/tournaments/{created['id']}").status_code == 404
    assert client.get(f"/api/matches/{created['id']}_WR1M0").status_code == 404
    assert client.get(f"/api/matches/{created['id']}_WR7M0").status_code == 404


def test_delete_tournament_leaves_other_tournaments(client: TestClient, session: Session):
    keep = _create_tournament(client, "Keep")
    drop = _create_tournament(client, "Drop")
    client.post(f"/api/tournaments/{keep['id']}/groups", json={"name": "Main"})
    drop_group = client.post(f"/api/tournaments/{drop['id']}/groups", json={"name": "Main"}).json()
    client.post(f"/api/tournaments/{drop['id']}/groups/{drop_group['id']}/teams", json={"name": "Team 1"})

    assert client.delete(f"/api/tournaments/{drop['id']}").status_code == 204

    assert session.exec(select(func.count(Team.id))).one() == 0
    assert [g.tournament_id for g in session.exec(select(Group)).all()] == [keep["id"]]
    assert client.get(f"/api/tournaments/{keep['id']}").status_code == 200


def test_delete_missing_tournament_returns_404(client: TestClient):
    response = client.delete("/api/tournaments/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Tournament not found"
