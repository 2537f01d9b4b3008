"""Test configuration and fixtures for bucket-browser."""

from unittest.mock import AsyncMock, MagicMock

import boto3
import pytest
from moto import mock_aws

from bucket_browser.objectstorage import S3ClientConfig, S3ClientManager
from bucket_browser.objectstorage.credentials import (
    CredentialResolver,
    StaticCredentialsProvider,
)

BUCKET = "test-bucket"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Dummy AWS environment so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")


@pytest.fixture
def mocked_aws(aws_credentials):
    """Activate moto for S3 and STS."""
    with mock_aws():
        yield


@pytest.fixture
def s3(mocked_aws):
    """Mocked S3 with an empty test bucket."""
    client = boto3.client(
        "s3",
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
    )
    client.create_bucket(Bucket=BUCKET)
    return client


@pytest.fixture
def static_resolver():
    """Resolver that only knows the static test credentials."""
    return CredentialResolver(
        [StaticCredentialsProvider("test_key", "test_secret")]
    )


@pytest.fixture
def client_manager(s3, static_resolver):
    """Client manager bound to the mocked test bucket."""
    return S3ClientManager(
        S3ClientConfig(bucket=BUCKET, region_name="us-east-1"), static_resolver
    )


@pytest.fixture
def photos_bucket(s3):
    """A bucket laid out as a small folder tree."""
    s3.put_object(
        Bucket=BUCKET,
        Key="photos/readme.txt",
        Body=b"x" * 128,
        ContentType="text/plain",
    )
    s3.put_object(
        Bucket=BUCKET, Key="photos/2023/beach.jpg", Body=b"jpg", ContentType="image/jpeg"
    )
    s3.put_object(
        Bucket=BUCKET, Key="photos/2024/city.jpg", Body=b"jpg", ContentType="image/jpeg"
    )
    s3.put_object(Bucket=BUCKET, Key="notes.txt", Body=b"notes")
    return s3


@pytest.fixture
def reports_bucket(s3):
    """Keys used by the search tests."""
    s3.put_object(
        Bucket=BUCKET, Key="reports/jan.csv", Body=b"a,b", ContentType="text/csv"
    )
    s3.put_object(
        Bucket=BUCKET, Key="reports/feb.csv", Body=b"a,b", ContentType="text/csv"
    )
    s3.put_object(Bucket=BUCKET, Key="notes.txt", Body=b"notes")
    return s3


@pytest.fixture
def stub_manager():
    """Client manager double whose store calls are AsyncMocks."""
    manager = MagicMock(spec=S3ClientManager)
    manager.bucket = BUCKET
    manager.list_objects_v2 = AsyncMock()
    manager.head_object = AsyncMock()
    manager.generate_presigned_url = AsyncMock()
    return manager
