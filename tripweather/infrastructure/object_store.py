"""
Object store access for tracking events.

The ingestion pipeline writes one JSON object per event under
``events/{YYYY}/{MM}/{DD}/``. The weather lookup only needs two operations,
list-by-prefix and get-by-key, so each backend is wrapped behind the same
small ``ObjectStore`` protocol:

- ``S3ObjectStore``: AWS S3 or any S3-compatible endpoint (boto3)
- ``GCSObjectStore``: Google Cloud Storage

Backend exceptions are re-raised as ``TransientIOError`` so callers handle a
single failure type. Transport retries and timeouts are left to the clients.
"""

from __future__ import annotations

from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from tripweather.config import STORE_BACKEND_GCS, STORE_BACKEND_S3, WeatherSettings
from tripweather.observability.logging import get_logger
from tripweather.weather.errors import ConfigurationError, TransientIOError
from tripweather.weather.types import StoreObjectRef

logger = get_logger(__name__)


class ObjectStore(Protocol):
    bucket_name: str

    def list_objects(self, prefix: str, max_keys: int) -> list[StoreObjectRef]: ...

    def get_object(self, key: str) -> bytes: ...


class S3ObjectStore:
    """S3 listing and reads for a single bucket"""

    def __init__(self, bucket_name: str, client=None, **client_kwargs):
        """
        Args:
            bucket_name: Bucket holding the event partitions
            client: Pre-built boto3 S3 client (tests pass a stubbed one)
            **client_kwargs: Passed to ``boto3.client("s3", ...)`` when no
                client is given (region_name, endpoint_url, credentials)
        """
        self.bucket_name = bucket_name
        self._client = client
        self._client_kwargs = client_kwargs

    @property
    def client(self):
        """Lazy-load the boto3 client"""
        if self._client is None:
            self._client = boto3.client("s3", **self._client_kwargs)
        return self._client

    def list_objects(self, prefix: str, max_keys: int) -> list[StoreObjectRef]:
        try:
            response = self.client.list_objects_v2(
                Bucket=self.bucket_name, Prefix=prefix, MaxKeys=max_keys
            )
        except (ClientError, BotoCoreError) as e:
            raise TransientIOError(f"S3 list failed for {prefix}: {e}", key=prefix) from e

        return [
            StoreObjectRef(key=obj["Key"], last_modified=obj.get("LastModified"))
            for obj in response.get("Contents", [])
        ]

    def get_object(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise TransientIOError(f"S3 get failed for {key}: {e}", key=key) from e


class GCSObjectStore:
    """GCS listing and reads for a single bucket

    Missing application default credentials surface on first use, when the
    lazy client is built, and are reported as TransientIOError like any other
    backend failure.
    """

    def __init__(self, bucket_name: str, project_id: str | None = None, client=None):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._client = client
        self._bucket = None

    @property
    def client(self) -> storage.Client:
        """Lazy-load GCS client"""
        if self._client is None:
            self._client = storage.Client(project=self.project_id)
        return self._client

    @property
    def bucket(self) -> storage.Bucket:
        """Lazy-load GCS bucket"""
        if self._bucket is None:
            self._bucket = self.client.bucket(self.bucket_name)
        return self._bucket

    def list_objects(self, prefix: str, max_keys: int) -> list[StoreObjectRef]:
        try:
            blobs = self.client.list_blobs(self.bucket_name, prefix=prefix, max_results=max_keys)
            return [StoreObjectRef(key=blob.name, last_modified=blob.updated) for blob in blobs]
        except (gcs_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            raise TransientIOError(f"GCS list failed for {prefix}: {e}", key=prefix) from e

    def get_object(self, key: str) -> bytes:
        try:
            return self.bucket.blob(key).download_as_bytes()
        except (gcs_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            raise TransientIOError(f"GCS get failed for {key}: {e}", key=key) from e


def create_object_store(settings: WeatherSettings) -> ObjectStore:
    """
    Build the configured store backend.

    Raises:
        ConfigurationError: Unknown backend, no bucket, or (S3) missing
            access key pair
    """
    if not settings.bucket:
        raise ConfigurationError(f"No bucket configured for the {settings.backend} weather store")

    if settings.backend == STORE_BACKEND_GCS:
        return GCSObjectStore(settings.bucket, project_id=settings.gcp_project)

    if settings.backend != STORE_BACKEND_S3:
        raise ConfigurationError(f"Unknown weather store backend: {settings.backend}")

    if not settings.aws_access_key_id or not settings.aws_secret_access_key:
        raise ConfigurationError("AWS credentials not configured")

    client_kwargs = {
        "region_name": settings.aws_region,
        "aws_access_key_id": settings.aws_access_key_id,
        "aws_secret_access_key": settings.aws_secret_access_key,
    }
    if settings.endpoint_url:
        client_kwargs["endpoint_url"] = settings.endpoint_url
    return S3ObjectStore(settings.bucket, **client_kwargs)
