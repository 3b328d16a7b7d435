"""
Pruebas del handle de storage S3 y de la configuración del firmador CloudFront.
"""
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from helpdesk.core.config import Settings
from helpdesk.core.exceptions import ConfigurationError
from helpdesk.infrastructure.storage.cloudfront import CdnSigner
from helpdesk.infrastructure.storage.s3 import ObjectStorage, object_key

STORAGE_ENV = (
    "BUCKET_REGION", "S3_REGION", "ACCESS_KEY", "S3_ACCESS_KEY", "SECRET_ACCESS_KEY",
    "S3_SECRET_KEY", "BUCKET_NAME", "S3_BUCKET", "KEY", "S3_KEY_PREFIX",
    "CLOUDFRONT_DOMAIN", "CLOUDFRONT_KEY_PAIR_ID", "CLOUDFRONT_PRIVATE_KEY", "CLOUDFRONT_PRIVATE_KEY_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in STORAGE_ENV:
        monkeypatch.delenv(name, raising=False)


def full_settings(**overrides) -> Settings:
    values = dict(
        bucket_region="us-east-1",
        access_key="AKIATEST",
        secret_access_key="secret",
        bucket_name="helpdesk-bucket",
        key_prefix="images",
        s3_max_attempts=4,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_object_key_layout() -> None:
    assert object_key("images", "png", "acme.png") == "images/png/acme.png"
    assert object_key("/images/", "jpg", "b.jpg") == "images/jpg/b.jpg"


def test_missing_storage_config_fails_fast() -> None:
    with pytest.raises(ConfigurationError) as exc:
        ObjectStorage.from_settings(Settings(_env_file=None))
    assert exc.value.missing == ["BUCKET_REGION", "ACCESS_KEY", "SECRET_ACCESS_KEY", "BUCKET_NAME", "KEY"]


def test_single_missing_variable_is_named() -> None:
    with pytest.raises(ConfigurationError) as exc:
        ObjectStorage.from_settings(full_settings(key_prefix=None))
    assert exc.value.missing == ["KEY"]
    assert "KEY" in exc.value.message


def test_env_aliases_are_read(monkeypatch) -> None:
    monkeypatch.setenv("BUCKET_NAME", "from-env")
    monkeypatch.setenv("KEY", "logos")
    s = Settings(_env_file=None)
    assert s.bucket_name == "from-env"
    assert s.key_prefix == "logos"


def test_client_uses_bounded_retries() -> None:
    storage = ObjectStorage.from_settings(full_settings())
    assert storage.bucket == "helpdesk-bucket"
    assert storage.key_for("png", "acme.png") == "images/png/acme.png"
    retries = storage.client.meta.config.retries
    assert retries["mode"] == "standard"
    assert retries["total_max_attempts"] == 4


def test_put_bytes_calls_put_object() -> None:
    storage = ObjectStorage.from_settings(full_settings())
    with Stubber(storage.client) as stub:
        stub.add_response(
            "put_object",
            {"ETag": '"abc"'},
            {"Bucket": "helpdesk-bucket", "Key": "images/png/acme.png", "Body": b"data", "ContentType": "image/png"},
        )
        key = storage.put_bytes("images/png/acme.png", b"data", content_type="image/png")
        stub.assert_no_pending_responses()
    assert key == "images/png/acme.png"


def test_put_bytes_propagates_errors() -> None:
    storage = ObjectStorage.from_settings(full_settings())
    with Stubber(storage.client) as stub:
        stub.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(ClientError):
            storage.put_bytes("images/png/acme.png", b"data")


class TestCdnSigner:
    def test_missing_config_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError) as exc:
            CdnSigner.from_settings(Settings(_env_file=None))
        assert exc.value.missing == ["CLOUDFRONT_DOMAIN", "CLOUDFRONT_KEY_PAIR_ID", "CLOUDFRONT_PRIVATE_KEY"]

    def test_missing_key_file(self, tmp_path) -> None:
        s = Settings(
            _env_file=None,
            cloudfront_domain="cdn.example.com",
            cloudfront_key_pair_id="K1",
            cloudfront_private_key_path=str(tmp_path / "nope.pem"),
        )
        with pytest.raises(ConfigurationError):
            CdnSigner.from_settings(s)

    def test_invalid_pem(self) -> None:
        s = Settings(
            _env_file=None,
            cloudfront_domain="cdn.example.com",
            cloudfront_key_pair_id="K1",
            cloudfront_private_key="not a key",
        )
        with pytest.raises(ConfigurationError):
            CdnSigner.from_settings(s)

    def test_inline_escaped_pem(self, private_key_pem) -> None:
        escaped = private_key_pem.decode("utf-8").replace("\n", "\\n")
        s = Settings(
            _env_file=None,
            cloudfront_domain="https://cdn.example.com/",
            cloudfront_key_pair_id="K1",
            cloudfront_private_key=escaped,
        )
        url = CdnSigner.from_settings(s).signed_url("/png/acme.png")
        assert url.startswith("https://cdn.example.com/png/acme.png?")

    def test_signed_url_has_canned_policy_params(self, cdn) -> None:
        url = cdn.signed_url("png/acme.png", expires_in=60)
        assert url.startswith("https://cdn.example.com/png/acme.png?")
        assert "Expires=" in url
        assert "Signature=" in url
        assert "Key-Pair-Id=KTESTPAIR" in url
