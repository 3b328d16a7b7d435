"""
Pruebas de API: actualización de perfil y endpoints de salud.
"""


def test_update_profile(client, customer_headers) -> None:
    r = client.post("/update-profile", json={"full_name": "Ana Pérez", "company": "Acme"}, headers=customer_headers)
    assert r.status_code == 200
    assert r.json() == {"message": "ok", "profile": {"full_name": "Ana Pérez", "company": "Acme"}}

    r = client.post("/update-profile", json={"phone": "555-0101"}, headers=customer_headers)
    assert r.json()["profile"] == {"full_name": "Ana Pérez", "company": "Acme", "phone": "555-0101"}


def test_update_profile_needs_fields(client, customer_headers) -> None:
    r = client.post("/update-profile", json={}, headers=customer_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "No hay campos para actualizar"


def test_get_profile(client, customer_headers) -> None:
    r = client.get("/profile", headers=customer_headers)
    assert r.status_code == 200
    assert r.json()["profile"] == {}


def test_profile_requires_token(client) -> None:
    assert client.post("/update-profile", json={"full_name": "x"}).status_code == 401


def test_health(client) -> None:
    assert client.get("/ping").json() == {"message": "pong"}
    assert client.get("/health").json() == {"ok": True, "db": True}


def test_debug_status(client) -> None:
    body = client.get("/_debug/status").json()
    assert body["storage_ready"] is True
    assert body["cdn_ready"] is True
    assert body["smtp_configured"] is False


def test_request_id_is_echoed(client) -> None:
    r = client.get("/ping", headers={"X-Request-Id": "abc123"})
    assert r.headers["X-Request-Id"] == "abc123"
