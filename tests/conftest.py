"""
Fixtures compartidas: Mongo en memoria (mongomock), storage S3 falso, firmador CDN
con llave RSA efímera y TestClient de la app.
"""
import os

# Antes de importar helpdesk: Settings se instancia al importar el módulo
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SMTP_HOST"] = ""

import mongomock
import pytest
from botocore.exceptions import ClientError
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from helpdesk.infrastructure.db import bootstrap, mongo
from helpdesk.infrastructure.security.token_service import create_access_token
from helpdesk.infrastructure.storage.cloudfront import CdnSigner
from helpdesk.infrastructure.storage.s3 import ObjectStorage
from helpdesk.repositories import user_repo


class FakeS3:
    """Registra cada put_object; las claves en `fail_keys` fallan como lo haría S3."""

    def __init__(self, fail_keys=()):
        self.fail_keys = set(fail_keys)
        self.puts = []

    def put_object(self, **params):
        if params["Key"] in self.fail_keys:
            raise ClientError(
                {"Error": {"Code": "InternalError", "Message": "We encountered an internal error"}},
                "PutObject",
            )
        self.puts.append(params)
        return {"ETag": '"etag"'}


@pytest.fixture
def db(monkeypatch):
    database = mongomock.MongoClient()["helpdesk_test"]
    monkeypatch.setattr(mongo, "_db", database)
    bootstrap.ensure_image_indexes()
    return database


@pytest.fixture
def s3():
    return FakeS3()


@pytest.fixture
def storage(s3):
    return ObjectStorage(s3, "helpdesk-bucket", "images")


@pytest.fixture(scope="session")
def private_key_pem():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def cdn(private_key_pem):
    return CdnSigner("cdn.example.com", "KTESTPAIR", private_key_pem, default_expires=300)


@pytest.fixture
def client(db, storage, cdn):
    from helpdesk.main import app

    app.state.storage = storage
    app.state.cdn = cdn
    yield TestClient(app)
    app.state.storage = None
    app.state.cdn = None


def _make_user(email: str, role: str):
    user_id = user_repo.insert_user({"email": email, "role": role})
    return user_repo.get_user_by_id(user_id)


@pytest.fixture
def operator(db):
    return _make_user("operador@acme.io", "operator")


@pytest.fixture
def customer(db):
    return _make_user("cliente@acme.io", "customer")


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user=user)}"}


@pytest.fixture
def operator_headers(operator):
    return auth_header(operator)


@pytest.fixture
def customer_headers(customer):
    return auth_header(customer)
