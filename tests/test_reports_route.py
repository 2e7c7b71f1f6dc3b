"""
Tests for:
  GET /api/v1/reports/{report_id}
"""

import json


_RESULT = {
    "result": "deepfake",
    "confidence": 80,
    "issues_detected": ["Temporal inconsistencies in motion blur"],
    "analysis_type": "media",
    "report_id": "ABC123XYZ",
}


def test_report_from_cache(client, mock_redis):
    mock_redis.setex("report:ABC123XYZ", 60, json.dumps(_RESULT))

    response = client.get("/api/v1/reports/ABC123XYZ")

    assert response.status_code == 200
    assert response.json()["confidence"] == 80


def test_report_id_is_case_insensitive(client, mock_redis):
    mock_redis.setex("report:ABC123XYZ", 60, json.dumps(_RESULT))
    assert client.get("/api/v1/reports/abc123xyz").status_code == 200


def test_report_from_history(client, mock_firebase):
    mock_firebase.seed("analyses", "ABC123XYZ", {"report_id": "ABC123XYZ", "result": _RESULT})

    response = client.get("/api/v1/reports/ABC123XYZ")

    assert response.status_code == 200
    assert response.json()["result"] == "deepfake"


def test_unknown_report(client):
    response = client.get("/api/v1/reports/NOTFOUND1")
    assert response.status_code == 404


def test_malformed_report_id(client):
    response = client.get("/api/v1/reports/bad-id!")
    assert response.status_code == 404


def test_round_trip_from_analysis(client):
    created = client.post(
        "/api/v1/analyze/media",
        files={"file": ("clip.mp4", b"\x00" * 1024 * 1024, "video/mp4")},
    ).json()

    fetched = client.get(f"/api/v1/reports/{created['report_id']}")

    assert fetched.status_code == 200
    assert fetched.json() == created
