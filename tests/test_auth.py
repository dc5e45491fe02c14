# tests/test_auth.py
from app.config import settings


def test_bearer_token_with_sub_claim(client, make_token):
    tok = make_token("sub-user", claim="sub")
    r = client.get("/api/cart", headers={"Authorization": f"Bearer {tok}"})
    assert r.status_code == 200
    assert r.json()["userId"] == "sub-user"


def test_token_signed_with_wrong_secret_is_403(client, make_token):
    tok = make_token("u1", secret="not-the-secret")
    r = client.get("/api/cart", headers={"Authorization": f"Bearer {tok}"})
    assert r.status_code == 403


def test_garbage_token_is_403(client):
    r = client.get("/api/cart", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 403


def test_token_without_identity_claim_is_403(client, make_token):
    tok = make_token("u1", claim="nickname")
    r = client.get("/api/cart", headers={"Authorization": f"Bearer {tok}"})
    assert r.status_code == 403


def test_gateway_user_id_header(client):
    r = client.post("/api/cart", json={"productId": "p1"}, headers={"x-user-id": "gw-user"})
    assert r.status_code == 201
    assert r.json()["userId"] == "gw-user"


def test_gateway_header_ignored_when_untrusted(client, monkeypatch):
    monkeypatch.setattr(settings, "TRUST_USER_ID_HEADER", False)
    r = client.get("/api/cart", headers={"x-user-id": "gw-user"})
    assert r.status_code == 401


def test_missing_identity_is_401_with_bearer_challenge(client):
    r = client.put("/api/cart/p1", json={"quantity": 1})
    assert r.status_code == 401
    assert r.json() == {"detail": "Authentication token is required"}
    assert r.headers["WWW-Authenticate"] == "Bearer"
