import pytest

from s3_sigv4_client.canonical import EMPTY_BODY_SHA256
from s3_sigv4_client.client import S3Client
from s3_sigv4_client.transport import S3Transport


def test_client_initialization(mock_client):
    assert mock_client.bucket == "test-bucket"
    assert (
        str(mock_client.bucket_url) == "https://s3.us-east-1.amazonaws.com/test-bucket"
    )
    assert isinstance(mock_client.transport, S3Transport)
    assert mock_client.transport._session is None


def test_client_uses_given_transport(config):
    transport = S3Transport(timeout=5)
    client = S3Client(config, transport=transport)
    assert client.transport is transport


def test_client_transport_from_config(config):
    client = S3Client(config)
    assert client.transport.timeout == config.timeout
    assert client.transport.trust_cert_path is None


def test_build_request_signs_bucket_url(mock_client):
    request = mock_client._build_request("GET", params={"list-type": "2"})

    assert str(request.url) == (
        "https://s3.us-east-1.amazonaws.com/test-bucket?list-type=2"
    )
    assert request.headers["host"] == "s3.us-east-1.amazonaws.com"
    assert request.headers["x-amz-content-sha256"] == EMPTY_BODY_SHA256
    assert request.headers["Authorization"].startswith(
        "AWS4-HMAC-SHA256 Credential=test-access-key/"
    )


def test_build_request_with_key_and_headers(mock_client):
    request = mock_client._build_request(
        "GET", key="photos/my photo.jpg", headers={"Range": "bytes=0-9"}
    )

    assert request.url.raw_path == "/test-bucket/photos/my%20photo.jpg"
    assert request.headers["Range"] == "bytes=0-9"
    assert "SignedHeaders=host;range;x-amz-content-sha256;x-amz-date," in (
        request.headers["Authorization"]
    )


@pytest.mark.parametrize(
    "key, raw_path",
    [
        ("a/../b.txt", "/test-bucket/a/../b.txt"),
        ("./c.txt", "/test-bucket/./c.txt"),
        ("/leading/slash.txt", "/test-bucket//leading/slash.txt"),
        ("double//slash.txt", "/test-bucket/double//slash.txt"),
        ("a+b=c?.txt", "/test-bucket/a%2Bb%3Dc%3F.txt"),
    ],
)
def test_build_request_keeps_key_verbatim(mock_client, key, raw_path):
    request = mock_client._build_request("DELETE", key=key)

    assert request.url.raw_path == raw_path
    assert request.url.query_string == ""
    assert request.url.host == "s3.us-east-1.amazonaws.com"


@pytest.mark.asyncio
async def test_context_manager(config):
    async with S3Client(config) as client:
        assert client.transport._session is not None
    assert client.transport._session is None


@pytest.mark.asyncio
async def test_close_without_session(mock_client):
    await mock_client.close()
    assert mock_client.transport._session is None


def test_from_config_file(tmp_path):
    config_file = tmp_path / "s3.ini"
    config_file.write_text("""[default]
endpoint = https://minio.example.com
bucket = data
aws_access_key_id = AKID
aws_secret_access_key = SECRET
""")

    client = S3Client.from_config_file(config_file)

    assert client.config.access_key == "AKID"
    assert str(client.bucket_url) == "https://minio.example.com/data"


def test_from_env():
    client = S3Client.from_env(
        {
            "S3_ENDPOINT": "http://localhost:9000",
            "S3_BUCKET": "local",
            "AWS_ACCESS_KEY_ID": "AKID",
            "AWS_SECRET_ACCESS_KEY": "SECRET",
            "S3_TIMEOUT": "5",
        }
    )

    assert str(client.bucket_url) == "http://localhost:9000/local"
    assert client.transport.timeout == 5.0
