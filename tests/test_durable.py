"""Tests for the S3-compatible durable tier."""

import io

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from unittest.mock import MagicMock, patch

from chuk_mcp_elevation.core.durable import (
    DurableStorageConfig,
    DurableTierClient,
    make_s3_client,
)
from chuk_mcp_elevation.core.errors import DurableTierError

KEY = "N46/N46E007.hgt.gz"


def client_error(code, operation="HeadObject"):
    return ClientError({"Error": {"Code": code, "Message": "msg"}}, operation)


@pytest.fixture
def config():
    return DurableStorageConfig(
        bucket="tiles",
        endpoint="http://localhost:9000",
        region="us-east-1",
        access_key_id="AKIAEXAMPLE",
        secret_access_key="supersecret",
        force_path_style=True,
    )


@pytest.fixture
def s3():
    return MagicMock(name="s3_client")


@pytest.fixture
def durable(config, s3):
    return DurableTierClient(config, client=s3)


class TestDurableStorageConfig:
    def test_defaults(self):
        config = DurableStorageConfig(bucket="tiles")
        assert config.endpoint is None
        assert config.region is None
        assert config.force_path_style is False

    def test_repr_hides_credentials(self, config):
        text = repr(config)
        assert "tiles" in text
        assert "AKIAEXAMPLE" not in text
        assert "supersecret" not in text


class TestMakeS3Client:
    def test_path_style(self, config):
        with patch("chuk_mcp_elevation.core.durable.boto3.client") as mock_client:
            make_s3_client(config)

        args, kwargs = mock_client.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "http://localhost:9000"
        assert kwargs["region_name"] == "us-east-1"
        assert kwargs["aws_access_key_id"] == "AKIAEXAMPLE"
        assert kwargs["aws_secret_access_key"] == "supersecret"
        assert kwargs["config"].s3 == {"addressing_style": "path"}

    def test_auto_addressing(self):
        with patch("chuk_mcp_elevation.core.durable.boto3.client") as mock_client:
            make_s3_client(DurableStorageConfig(bucket="tiles"))

        kwargs = mock_client.call_args.kwargs
        assert kwargs["endpoint_url"] is None
        assert kwargs["config"].s3 == {"addressing_style": "auto"}

    def test_client_built_when_not_injected(self, config):
        with patch("chuk_mcp_elevation.core.durable.make_s3_client") as mock_make:
            DurableTierClient(config)
        mock_make.assert_called_once_with(config)


class TestDurableExists:
    @pytest.mark.asyncio
    async def test_present(self, durable, s3):
        s3.head_object.return_value = {"ContentLength": 10}
        assert await durable.exists(KEY) is True
        s3.head_object.assert_called_once_with(Bucket="tiles", Key=KEY)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["404", "NoSuchKey", "NotFound"])
    async def test_missing(self, durable, s3, code):
        s3.head_object.side_effect = client_error(code)
        assert await durable.exists(KEY) is False

    @pytest.mark.asyncio
    async def test_access_denied_raises(self, durable, s3):
        s3.head_object.side_effect = client_error("403")
        with pytest.raises(DurableTierError, match="existence check failed"):
            await durable.exists(KEY)

    @pytest.mark.asyncio
    async def test_connection_error_raises(self, durable, s3):
        s3.head_object.side_effect = EndpointConnectionError(endpoint_url="http://localhost:9000")
        with pytest.raises(DurableTierError):
            await durable.exists(KEY)


class TestDurableGet:
    @pytest.mark.asyncio
    async def test_returns_body_bytes(self, durable, s3):
        body = MagicMock()
        body.read.return_value = b"gzip-bytes"
        s3.get_object.return_value = {"Body": body}

        assert await durable.get(KEY) == b"gzip-bytes"
        s3.get_object.assert_called_once_with(Bucket="tiles", Key=KEY)
        body.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, durable, s3):
        s3.get_object.side_effect = client_error("NoSuchKey", "GetObject")
        assert await durable.get(KEY) is None

    @pytest.mark.asyncio
    async def test_other_error_raises(self, durable, s3):
        s3.get_object.side_effect = client_error("InternalError", "GetObject")
        with pytest.raises(DurableTierError, match="get failed"):
            await durable.get(KEY)


class TestDurablePut:
    @pytest.mark.asyncio
    async def test_put_object_arguments(self, durable, s3):
        await durable.put(KEY, b"gzip-bytes")
        s3.put_object.assert_called_once_with(
            Bucket="tiles",
            Key=KEY,
            Body=b"gzip-bytes",
            ContentType="application/gzip",
        )

    @pytest.mark.asyncio
    async def test_put_error_raises(self, durable, s3):
        s3.put_object.side_effect = client_error("SlowDown", "PutObject")
        with pytest.raises(DurableTierError, match="put failed"):
            await durable.put(KEY, b"gzip-bytes")

    @pytest.mark.asyncio
    async def test_put_then_get_returns_same_bytes(self, durable, s3):
        stored = {}

        def put_object(Bucket, Key, Body, ContentType):
            stored[Key] = Body

        def get_object(Bucket, Key):
            return {"Body": io.BytesIO(stored[Key])}

        s3.put_object.side_effect = put_object
        s3.get_object.side_effect = get_object

        await durable.put(KEY, b"\x1f\x8b payload")
        assert await durable.get(KEY) == b"\x1f\x8b payload"
