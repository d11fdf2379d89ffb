from fastapi.testclient import TestClient

from flock.app.server import app, controller


def test_status_reports_population_and_metrics():
    client = TestClient(app)
    response = client.get("/api/status")
    assert response.status_code == 200
    payload = response.json()
    assert payload["population"] == len(controller.world.agents)
    assert "polarization" in payload["metrics"]


def test_speed_multiplier_is_clamped():
    client = TestClient(app)
    assert client.post("/api/control/speed", json={"multiplier": 12}).json() == {"multiplier": 5.0}
    assert client.post("/api/control/speed", json={"multiplier": 0.01}).json() == {"multiplier": 0.1}
    client.post("/api/control/speed", json={"multiplier": 1.0})


def test_index_serves_canvas_page():
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    assert "<canvas" in response.text


def test_lifespan_starts_and_closes_the_simulation_loop():
    with TestClient(app) as client:
        assert controller.running
        assert controller._broadcast_task is not None
        assert client.get("/api/status").json()["running"] is True
    assert not controller.running
    assert controller._broadcast_task is None
