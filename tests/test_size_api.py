import pytest
from tryon.schemas.avatar import Avatar
from tryon.schemas.size import Measurements


def _avatar(avatar_id, measurements=None):
    return Avatar(
        id=avatar_id,
        mesh_url=f"/files/{avatar_id}_mesh.glb",
        texture_url=f"/files/{avatar_id}_texture.jpg",
        created_at="2026-01-01T00:00:00Z",
        measurements=measurements,
    )


def test_recommendations_for_avatar(client, store, api_headers):
    store.save(_avatar("a1", Measurements(bust=85, waist=80, hips=85, inseam=70)))
    r = client.get("/v1/size/recommendations/a1", headers=api_headers)
    assert r.status_code == 200
    body = r.json()
    assert [rec["category"] for rec in body] == ["tops", "bottoms", "dresses", "outerwear"]
    assert set(body[0]) == {"category", "recommendedSize", "confidence"}
    assert body[0]["recommendedSize"] == "S"
    assert body[1]["recommendedSize"] == "M"
    assert body[1]["confidence"] == pytest.approx(0.95)
    # avg 83.33 on the dress ladder
    assert body[2] == {"category": "dresses", "recommendedSize": "M", "confidence": 0.9}
    assert body[3]["recommendedSize"] == "M"
    assert body[3]["confidence"] == pytest.approx(0.68)


def test_recommendations_unknown_avatar(client, api_headers):
    r = client.get("/v1/size/recommendations/missing", headers=api_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Avatar not found"


def test_recommendations_avatar_without_measurements(client, store, api_headers):
    store.save(_avatar("bare"))
    r = client.get("/v1/size/recommendations/bare", headers=api_headers)
    assert r.status_code == 422
    assert r.json()["detail"] == "No measurements available"


def test_recommendations_avatar_with_empty_measurements(client, store, api_headers):
    store.save(_avatar("empty", Measurements()))
    r = client.get("/v1/size/recommendations/empty", headers=api_headers)
    assert r.status_code == 200
    assert [(rec["recommendedSize"], rec["confidence"]) for rec in r.json()] == [("M", 0.6)] * 4


def test_direct_recommendations_empty_body(client, api_headers):
    r = client.post("/v1/size/recommendations", json={}, headers=api_headers)
    assert r.status_code == 200
    assert r.json() == [
        {"category": "tops", "recommendedSize": "M", "confidence": 0.6},
        {"category": "bottoms", "recommendedSize": "M", "confidence": 0.6},
        {"category": "dresses", "recommendedSize": "M", "confidence": 0.6},
        {"category": "outerwear", "recommendedSize": "M", "confidence": 0.6},
    ]


def test_direct_recommendations_camel_case(client, api_headers):
    r = client.post("/v1/size/recommendations", json={"bust": 115, "shoulderWidth": 36}, headers=api_headers)
    assert r.status_code == 200
    outerwear = r.json()[3]
    assert outerwear["recommendedSize"] == "XXXL"
    assert outerwear["confidence"] == pytest.approx(0.6525)


def test_direct_recommendations_rejects_non_numeric(client, api_headers):
    r = client.post("/v1/size/recommendations", json={"bust": "wide"}, headers=api_headers)
    assert r.status_code == 422


@pytest.mark.parametrize("payload", [
    '{"bust": NaN}',
    '{"waist": Infinity, "hips": 90}',
    '{"shoulderWidth": -Infinity}',
])
def test_direct_recommendations_rejects_non_finite(client, api_headers, payload):
    headers = {**api_headers, "Content-Type": "application/json"}
    r = client.post("/v1/size/recommendations", content=payload, headers=headers)
    assert r.status_code == 422
