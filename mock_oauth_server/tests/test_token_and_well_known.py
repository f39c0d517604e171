"""
Tests for POST /token, JWKS and discovery endpoints.
"""
from datetime import datetime, timedelta, timezone

import jwt

from mock_oauth_server.models import AuthorizationGrant

ISSUER = "http://mock-issuer.test"
REDIRECT_URI = "http://127.0.0.1:8000/callback"


def _seed_code(app, code="code-1", client_id="test-client", minutes=10):
    app.state.store.store_auth_code(
        code,
        AuthorizationGrant(
            client_id=client_id,
            redirect_uri=REDIRECT_URI,
            scope="openid email",
            expires_at=datetime.now(timezone.utc) + timedelta(minutes=minutes),
        ),
    )


def _token_form(code="code-1", client_id="test-client", redirect_uri=REDIRECT_URI):
    return {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": client_id,
        "redirect_uri": redirect_uri,
    }


# --- POST /token ---


def test_token_success(client, app, signer):
    _seed_code(app)
    r = client.post("/token", data=_token_form())
    assert r.status_code == 200
    data = r.json()
    assert set(data) == {"access_token", "token_type", "expires_in", "refresh_token", "id_token"}
    assert data["token_type"] == "Bearer"
    assert data["expires_in"] == 3600
    assert data["refresh_token"]

    access = signer.verify(data["access_token"])
    assert access["iss"] == ISSUER
    assert access["sub"] == "user-test-client"
    assert access["scope"] == ["openid", "email"]
    id_claims = signer.verify(data["id_token"])
    assert id_claims["aud"] == "test-client"
    assert app.state.store.get_client_id_by_token(data["access_token"]) == "test-client"


def test_token_code_single_use(client, app):
    _seed_code(app)
    assert client.post("/token", data=_token_form()).status_code == 200
    r = client.post("/token", data=_token_form())
    assert r.status_code == 400
    assert "Invalid authorization code" in r.text


def test_token_expired_code(client, app):
    _seed_code(app, minutes=-1)
    r = client.post("/token", data=_token_form())
    assert r.status_code == 400
    assert "Invalid authorization code" in r.text


def test_token_unknown_code(client):
    r = client.post("/token", data=_token_form(code="nope"))
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "invalid_grant"


def test_token_client_mismatch(client, app):
    _seed_code(app)
    r = client.post("/token", data=_token_form(client_id="other-client"))
    assert r.status_code == 400
    assert "Client ID mismatch" in r.text
    # Code is still usable by the right client
    assert client.post("/token", data=_token_form()).status_code == 200


def test_token_redirect_uri_mismatch(client, app):
    _seed_code(app)
    r = client.post("/token", data=_token_form(redirect_uri="http://evil.com/callback"))
    assert r.status_code == 400
    assert "Redirect URI mismatch" in r.text


def test_token_unsupported_grant_type(client, app):
    _seed_code(app)
    form = dict(_token_form(), grant_type="password")
    r = client.post("/token", data=form)
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "unsupported_grant_type"


def test_token_missing_grant_type(client):
    r = client.post("/token", data={})
    assert r.status_code == 400


def test_token_get_not_allowed(client):
    assert client.get("/token").status_code == 405


def test_token_error_scenario_short_circuits(client, app):
    _seed_code(app)
    client.post(
        "/config",
        json={"error_scenario": {"endpoint": "token", "error": "invalid_client", "error_description": "Client authentication failed"}},
    )
    r = client.post("/token", data=_token_form())
    assert r.status_code == 401
    assert r.json() == {"error": "invalid_client", "error_description": "Client authentication failed"}
    # No code consumed
    assert app.state.store.get_auth_code("code-1") is not None


def test_token_error_scenario_without_description(client):
    client.post("/config", json={"error_scenario": {"endpoint": "token", "error": "temporarily_unavailable"}})
    r = client.post("/token", data={})
    assert r.status_code == 503
    assert r.json() == {"error": "temporarily_unavailable"}


def test_token_signing_failure_returns_500(client, app, monkeypatch):
    from mock_oauth_server.errors import TokenSigningError

    def fail(*args, **kwargs):
        raise TokenSigningError("boom")

    _seed_code(app)
    monkeypatch.setattr(app.state.signer, "sign_access_token", fail)
    r = client.post("/token", data=_token_form())
    assert r.status_code == 500
    assert r.json()["detail"] == {"error": "server_error"}
    assert "boom" not in r.text


# --- JWKS / discovery ---


def test_jwks_returns_key(client, signer):
    r = client.get("/jwks")
    assert r.status_code == 200
    data = r.json()
    assert len(data["keys"]) == 1
    key = data["keys"][0]
    assert key["kid"] == "mock-key-1"
    assert key["kty"] == "RSA"
    assert key["alg"] == "RS256"
    assert key["use"] == "sig"
    assert client.get("/.well-known/jwks.json").json() == data


def test_jwks_verifies_issued_token(client, app):
    _seed_code(app)
    tokens = client.post("/token", data=_token_form()).json()
    jwk = jwt.PyJWK(client.get("/jwks").json()["keys"][0])
    assert jwt.get_unverified_header(tokens["id_token"])["kid"] == jwk.key_id
    claims = jwt.decode(tokens["id_token"], jwk.key, algorithms=["RS256"], audience="test-client", issuer=ISSUER)
    assert claims["sub"] == "user-test-client"


def test_openid_configuration(client):
    r = client.get("/.well-known/openid-configuration")
    assert r.status_code == 200
    data = r.json()
    assert data["issuer"] == ISSUER
    assert data["authorization_endpoint"] == f"{ISSUER}/authorize"
    assert data["token_endpoint"] == f"{ISSUER}/token"
    assert data["userinfo_endpoint"] == f"{ISSUER}/userinfo"
    assert data["jwks_uri"] == f"{ISSUER}/jwks"
    assert data["response_types_supported"] == ["code"]
    assert data["id_token_signing_alg_values_supported"] == ["RS256"]
    assert "email_verified" in data["claims_supported"]


def test_openid_configuration_strips_trailing_slash(signer):
    from fastapi.testclient import TestClient

    from mock_oauth_server.main import create_app

    c = TestClient(create_app(issuer_url="https://auth.example.com/", signer=signer))
    data = c.get("/.well-known/openid-configuration").json()
    assert data["issuer"] == "https://auth.example.com"
    assert data["token_endpoint"] == "https://auth.example.com/token"
