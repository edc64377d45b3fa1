import io

import pytest
from fastapi.testclient import TestClient

from autocluster.api import app


@pytest.fixture
def client():
    return TestClient(app)


def upload(df, name="data.csv"):
    buf = io.BytesIO()
    df.to_csv(buf, index=False)
    buf.seek(0)
    return {"file": (name, buf, "text/csv")}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_cluster_endpoint(client, blobs):
    response = client.post(
        "/cluster/",
        files=upload(blobs.assign(label="p")),
        data={"columns": "x, y", "k_min": "2", "k_max": "5", "include_plots": "false"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["rows"] == 60
    assert body["features"] == ["x", "y"]
    assert body["final_stage"] == "original"

    original = body["stages"]["original"]
    assert original["k"] == 2
    assert original["adequate"] is True
    assert sum(original["cluster_sizes"].values()) == 60
    assert len(original["labels"]) == 60
    assert "plots" not in original
    assert {p["Feature"] for p in original["profiles"]} == {"x", "y"}


def test_cluster_endpoint_with_reduction_and_plots(client, three_blobs):
    response = client.post(
        "/cluster/",
        files=upload(three_blobs),
        data={"k_min": "2", "k_max": "4", "force_reduction": "true"},
    )
    assert response.status_code == 200
    stages = response.json()["stages"]
    assert set(stages) == {"original", "mds"}
    assert set(stages["mds"]["plots"]) == {"silhouette", "cluster_means", "embedding"}
    assert "embedding" not in stages["original"]["plots"]


def test_cluster_endpoint_rejects_bad_input(client, blobs):
    response = client.post("/cluster/", files=upload(blobs, name="data.json"))
    assert response.status_code == 422

    response = client.post("/cluster/", files=upload(blobs), data={"columns": "missing"})
    assert response.status_code == 422
    assert "not found" in response.json()["detail"]

    response = client.post("/cluster/", files=upload(blobs), data={"k_min": "1"})
    assert response.status_code == 422


def test_cluster_endpoint_rejects_corrupt_spreadsheet(client):
    broken = io.BytesIO(b"PK\x03\x04" + b"\x00" * 64)
    response = client.post(
        "/cluster/",
        files={"file": ("data.xlsx", broken, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
    )
    assert response.status_code == 422
    assert "Could not read uploaded file" in response.json()["detail"]


def test_cluster_endpoint_defaults_follow_environment(client, blobs, monkeypatch):
    monkeypatch.setenv("AUTOCLUSTER_K_MAX", "3")
    response = client.post("/cluster/", files=upload(blobs), data={"include_plots": "false"})
    assert response.status_code == 200
    scores = response.json()["stages"]["original"]["scores"]
    assert [s["k"] for s in scores] == [2, 3]
