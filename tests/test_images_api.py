"""
Pruebas de API: subida de imágenes, listado y URLs firmadas del CDN.
"""
import pytest
from botocore.exceptions import ClientError

from helpdesk.services import image_service


def upload(client, headers, name="acme.png", data=b"img-bytes", ctype="image/png"):
    return client.post("/images", files={"file": (name, data, ctype)}, headers=headers)


def test_upload_creates_record_and_object(client, s3, db, customer, customer_headers) -> None:
    r = upload(client, customer_headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["key"] == "images/png/acme.png"
    assert body["id"]
    assert s3.puts[0]["Body"] == b"img-bytes"
    doc = db["images"].find_one({"domainame": "acme", "extension": "png"})
    assert doc["uploaded_by"] == str(customer["_id"])


def test_duplicate_upload_conflicts(client, s3, customer_headers) -> None:
    assert upload(client, customer_headers).status_code == 201
    r = upload(client, customer_headers)
    assert r.status_code == 409
    assert r.json()["message"] == "La imagen ya existe"
    assert len(s3.puts) == 1


def test_upload_rejects_unsupported_extension(client, s3, customer_headers) -> None:
    r = upload(client, customer_headers, name="doc.pdf", ctype="application/pdf")
    assert r.status_code == 415
    assert s3.puts == []


def test_upload_failure_reports_gateway_error(client, s3, db, customer_headers) -> None:
    s3.fail_keys.add("images/png/acme.png")
    r = upload(client, customer_headers)
    assert r.status_code == 502
    body = r.json()
    assert body["message"] == "No se pudo subir la imagen"
    assert "internal error" not in r.text
    assert db["images"].count_documents({}) == 0


def test_cleanup_failure_keeps_upload_error(db, storage, s3, monkeypatch, caplog) -> None:
    s3.fail_keys.add("images/png/acme.png")

    def broken_delete(image_id):
        raise RuntimeError("mongo caído")

    monkeypatch.setattr(image_service.images_repo, "delete_image", broken_delete)

    with pytest.raises(ClientError):
        image_service.store_new_image(storage, b"img", "acme.png", "u1")
    assert "No se pudo eliminar el registro" in caplog.text


def test_upload_requires_token(client) -> None:
    r = upload(client, {})
    assert r.status_code == 401
    assert r.json()["message"] == "Falta token"


def test_upload_without_storage_is_unavailable(client, customer_headers) -> None:
    client.app.state.storage = None
    r = upload(client, customer_headers)
    assert r.status_code == 503


def test_my_images(client, customer, customer_headers) -> None:
    assert client.get("/images/mine", headers=customer_headers).json() == {"images": []}
    upload(client, customer_headers, name="acme.png")
    upload(client, customer_headers, name="globex.jpg", ctype="image/jpeg")
    images = client.get("/images/mine", headers=customer_headers).json()["images"]
    assert sorted(i["domainame"] for i in images) == ["acme", "globex"]
    assert image_service.get_images_by_user("someone-else") is None


def test_company_signed_url(client, customer_headers) -> None:
    upload(client, customer_headers, name="acme.png")
    r = client.get("/images/company/acme")
    assert r.status_code == 200
    url = r.json()["url"]
    assert url.startswith("https://cdn.example.com/png/acme.png?")
    assert "Key-Pair-Id=KTESTPAIR" in url


def test_company_signed_url_not_found(client) -> None:
    assert client.get("/images/company/acme").status_code == 404
    assert client.get("/images/company/acme", params={"extension": "../x"}).status_code == 422
