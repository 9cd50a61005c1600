"""Tests for the S3 and GCS object store adapters."""

from __future__ import annotations

import io
from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber
from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions

from tripweather.config import WeatherSettings
from tripweather.infrastructure import object_store
from tripweather.infrastructure.object_store import (
    GCSObjectStore,
    S3ObjectStore,
    create_object_store,
)
from tripweather.weather.errors import ConfigurationError, TransientIOError
from tripweather.weather.scanner import EventStoreScanner


@pytest.fixture
def s3_client():
    client = boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber


class TestS3ObjectStore:
    def test_list_objects(self, s3_client):
        client, stubber = s3_client
        modified = datetime(2025, 3, 7, 9, 30, tzinfo=UTC)
        stubber.add_response(
            "list_objects_v2",
            {"Contents": [{"Key": "events/2025/03/07/a.json", "LastModified": modified}]},
            {"Bucket": "weather-events", "Prefix": "events/2025/03/07/", "MaxKeys": 200},
        )

        refs = S3ObjectStore("weather-events", client=client).list_objects("events/2025/03/07/", 200)

        assert len(refs) == 1
        assert refs[0].key == "events/2025/03/07/a.json"
        assert refs[0].last_modified == modified
        stubber.assert_no_pending_responses()

    def test_empty_listing(self, s3_client):
        client, stubber = s3_client
        stubber.add_response("list_objects_v2", {"KeyCount": 0})
        assert S3ObjectStore("weather-events", client=client).list_objects("events/", 1) == []

    def test_list_error_wrapped(self, s3_client):
        client, stubber = s3_client
        stubber.add_client_error("list_objects_v2", service_error_code="NoSuchBucket")

        with pytest.raises(TransientIOError) as exc_info:
            S3ObjectStore("weather-events", client=client).list_objects("events/2025/03/07/", 200)
        assert exc_info.value.key == "events/2025/03/07/"

    def test_get_object(self, s3_client):
        client, stubber = s3_client
        body = b'{"data": {}}'
        stubber.add_response(
            "get_object",
            {"Body": StreamingBody(io.BytesIO(body), len(body))},
            {"Bucket": "weather-events", "Key": "events/a.json"},
        )
        assert S3ObjectStore("weather-events", client=client).get_object("events/a.json") == body

    def test_get_error_wrapped(self, s3_client):
        client, stubber = s3_client
        stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)

        with pytest.raises(TransientIOError):
            S3ObjectStore("weather-events", client=client).get_object("events/missing.json")


class TestGCSObjectStore:
    def test_list_objects(self):
        client = MagicMock()
        updated = datetime(2025, 3, 7, 9, 30, tzinfo=UTC)
        client.list_blobs.return_value = [SimpleNamespace(name="events/a.json", updated=updated)]

        refs = GCSObjectStore("weather-events", client=client).list_objects("events/", 50)

        client.list_blobs.assert_called_once_with("weather-events", prefix="events/", max_results=50)
        assert refs[0].key == "events/a.json"
        assert refs[0].last_modified == updated

    def test_get_object(self):
        client = MagicMock()
        client.bucket.return_value.blob.return_value.download_as_bytes.return_value = b"{}"

        assert GCSObjectStore("weather-events", client=client).get_object("events/a.json") == b"{}"
        client.bucket.return_value.blob.assert_called_once_with("events/a.json")

    def test_errors_wrapped(self):
        client = MagicMock()
        client.list_blobs.side_effect = gcs_exceptions.Forbidden("denied")
        client.bucket.return_value.blob.return_value.download_as_bytes.side_effect = (
            gcs_exceptions.NotFound("missing")
        )
        store = GCSObjectStore("weather-events", client=client)

        with pytest.raises(TransientIOError):
            store.list_objects("events/", 50)
        with pytest.raises(TransientIOError):
            store.get_object("events/a.json")

    def test_missing_credentials_wrapped(self, monkeypatch):
        def no_credentials(project=None):
            raise auth_exceptions.DefaultCredentialsError("Could not automatically determine credentials")

        monkeypatch.setattr(object_store.storage, "Client", no_credentials)
        store = GCSObjectStore("weather-events")

        with pytest.raises(TransientIOError):
            store.list_objects("events/", 1)
        with pytest.raises(TransientIOError):
            store.get_object("events/a.json")
        assert not EventStoreScanner(store).check_connection()


class TestCreateObjectStore:
    def test_s3_with_credentials(self):
        settings = WeatherSettings(
            bucket="weather-events",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            endpoint_url="http://localhost:9000",
        )
        store = create_object_store(settings)
        assert isinstance(store, S3ObjectStore)
        assert store.bucket_name == "weather-events"
        assert store._client_kwargs["endpoint_url"] == "http://localhost:9000"

    def test_gcs_backend(self):
        store = create_object_store(WeatherSettings(backend="gcs", bucket="weather-events"))
        assert isinstance(store, GCSObjectStore)

    @pytest.mark.parametrize(
        "settings",
        [
            WeatherSettings(bucket=None, aws_access_key_id="AKIA", aws_secret_access_key="secret"),
            WeatherSettings(bucket="weather-events", aws_access_key_id="AKIA"),
            WeatherSettings(backend="azure", bucket="weather-events"),
        ],
    )
    def test_incomplete_configuration_rejected(self, settings):
        with pytest.raises(ConfigurationError):
            create_object_store(settings)
