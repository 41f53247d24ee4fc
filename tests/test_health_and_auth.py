from tryon.security import create_jwt


def test_health(client):
    r = client.get("/v1/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_token_requires_api_key(client):
    r = client.post("/v1/auth/token")
    assert r.status_code == 401


def test_token(client, api_headers):
    r = client.post("/v1/auth/token", headers=api_headers)
    assert r.status_code == 200
    assert "token" in r.json()


def test_issued_token_is_accepted(client, api_headers):
    token = client.post("/v1/auth/token", headers=api_headers).json()["token"]
    r = client.post("/v1/size/recommendations", json={}, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200


def test_expired_token_rejected(client):
    token = create_jwt("tryon-frontend", ttl_seconds=-60)
    r = client.post("/v1/size/recommendations", json={}, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_wrong_api_key_rejected(client):
    r = client.post("/v1/size/recommendations", json={}, headers={"X-API-Key": "nope"})
    assert r.status_code == 401


def test_missing_credentials_rejected(client):
    r = client.get("/v1/size/recommendations/abc")
    assert r.status_code == 401


def test_debug_status(client, store, api_headers):
    r = client.get("/v1/debug/status", headers=api_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["storage"]["status"] == "ok"
    assert body["avatars"] == 0
