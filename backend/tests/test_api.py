import pytest
from fastapi.testclient import TestClient

from backend.main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client

@pytest.fixture(scope="module")
def run(client):
    response = client.post("/api/simulation/reset", json={"population_size": 12, "seed": 7})
    assert response.status_code == 200
    return response.json()


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to the CornBreeder API"}

def test_reset_starts_at_founders(run):
    assert run["generation"] == 1
    assert run["population_size"] == 12
    assert run["stats"]["generation"] == 1
    assert run["weather"] in ("sunny", "cloudy", "rainy")

def test_population_and_plant_lookup(client, run):
    population = client.get("/api/population").json()
    assert population["generation"] == 1
    assert len(population["plants"]) == 12
    plant = population["plants"][0]
    assert plant["loci"] == [int(a["maternal"]) + int(a["paternal"]) for a in plant["diploid"]]

    response = client.get(f"/api/plants/{plant['id']}")
    assert response.status_code == 200
    assert response.json() == plant

def test_unknown_plant_is_404(client, run):
    assert client.get("/api/plants/G1-999-ffffff").status_code == 404

def test_bad_selection_request_is_rejected(client, run):
    assert client.post("/api/selection/auto", json={"criterion": "sweetness"}).status_code == 400
    assert client.post("/api/selection/auto", json={"intensity": 0}).status_code == 422

def test_single_parent_is_rejected(client, run):
    plant_id = client.get("/api/population").json()["plants"][0]["id"]
    response = client.post("/api/generations/advance", json={"parent_ids": [plant_id]})
    assert response.status_code == 400
    assert client.get("/api/simulation/state").json()["generation"] == 1

def test_selection_then_advance(client, run):
    selection = client.post("/api/selection/auto", json={"criterion": "yield", "intensity": 0.25}).json()
    assert len(selection["selected_ids"]) == 3
    assert selection["selection_differential"]["yield"] >= 0

    response = client.post("/api/generations/advance", json={"parent_ids": selection["selected_ids"]})
    assert response.status_code == 200
    body = response.json()
    assert body["generation"] == 2
    assert body["stats"]["size"] == 12

    history = client.get("/api/history").json()
    assert [entry["generation"] for entry in history["history"]] == [1, 2]
    assert set(history["genetic_gain"]) == {"yield", "resistance", "height"}

def test_archived_generation_matches_live_population(client, run):
    state = client.get("/api/simulation/state").json()
    live = client.get("/api/population").json()
    archived = client.get(f"/api/runs/{state['run_id']}/generations/{state['generation']}")
    assert archived.status_code == 200
    body = archived.json()
    assert body["plants"] == live["plants"]
    assert body["stats"] == state["stats"]

    assert client.get(f"/api/runs/{state['run_id']}/generations/99").status_code == 404

def test_genomic_prediction_and_plot_download(client, run):
    response = client.post("/api/analysis/genomic-prediction", json={"trait": "height", "k_folds": 3})
    assert response.status_code == 200
    body = response.json()
    assert body["trait"] == "height"
    assert set(body["cv_results"]) == {"r2", "rmse", "pearson_r"}
    assert set(body["relationship"]) == {"mean_relationship", "max_relationship", "mean_inbreeding"}

    plot = client.get(body["plots"]["accuracy"])
    assert plot.status_code == 200
    assert plot.headers["content-type"] == "image/png"

    assert client.post("/api/analysis/genomic-prediction", json={"trait": "color"}).status_code == 400

def test_progress_analysis(client, run):
    response = client.post("/api/analysis/progress")
    assert response.status_code == 200
    body = response.json()
    assert set(body["genetic_trend"]) == {"yield", "resistance", "height"}
    assert "progress" in body["plots"]
    assert client.get(f"/api/results/{body['run_id']}/plots/missing.png").status_code == 404

def test_failed_archive_keeps_live_generation(client, run, monkeypatch):
    from backend.services import simulation_service

    async def failing_archive(db, run_id, result):
        raise RuntimeError("archive unavailable")

    before = client.get("/api/simulation/state").json()
    parent_ids = [plant["id"] for plant in client.get("/api/population").json()["plants"][:3]]

    monkeypatch.setattr(simulation_service, "_archive_generation", failing_archive)
    response = client.post("/api/generations/advance", json={"parent_ids": parent_ids})
    assert response.status_code == 500

    after = client.get("/api/simulation/state").json()
    assert after["generation"] == before["generation"]
    assert len(client.get("/api/history").json()["history"]) == before["generation"]
    assert client.get(f"/api/runs/{before['run_id']}/generations/{before['generation'] + 1}").status_code == 404

def test_run_timestamps_are_timezone_aware():
    from backend.models.models import SimulationRun

    run = SimulationRun(population_size=5, params={})
    assert run.created_at.tzinfo is not None
    assert run.created_at.utcoffset().total_seconds() == 0
