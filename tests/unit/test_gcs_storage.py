"""
Unit tests for GCSObjectStore using mock doubles of the storage client.

Covers:
    - metadata mirrored onto headers (unset fields skipped, ETag quoted)
    - chunked streaming via blob.open("rb", raw_download=True), reader closed
    - error mapping: missing -> 404, forbidden -> 403, other API failures and
      credential refresh failures -> 502
    - a failure mid-stream surfaces as BackendUnavailable and still closes the reader
"""

from datetime import datetime, timezone
from unittest import mock

import pytest
from google.api_core.exceptions import Forbidden, NotFound, RetryError, ServiceUnavailable, Unauthorized
from google.auth.exceptions import RefreshError, TransportError

from gcs_proxy.errors import AccessDenied, BackendUnavailable, ObjectNotFound
from gcs_proxy.storage.gcs_storage import GCSObjectStore


def _blob(**overrides):
    blob = mock.MagicMock()
    blob.name = "file.txt"
    blob.content_type = "text/plain"
    blob.size = 11
    blob.content_encoding = None
    blob.content_language = None
    blob.content_disposition = None
    blob.cache_control = "public, max-age=60"
    blob.etag = "CKih16GjycICEAE="
    blob.updated = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    for name, value in overrides.items():
        setattr(blob, name, value)
    return blob


@pytest.fixture
def bucket():
    return mock.MagicMock()


@pytest.fixture
def store(bucket):
    client = mock.MagicMock()
    client.bucket.return_value = bucket
    return GCSObjectStore(bucket_name="my-bucket", client=client, chunk_size=4)


def test_headers_mirror_blob_metadata(store, bucket):
    bucket.get_blob.return_value = _blob()
    obj = store.open_object("file.txt")
    bucket.get_blob.assert_called_once_with("file.txt")
    assert obj.headers == {
        "Content-Type": "text/plain",
        "Content-Length": "11",
        "Cache-Control": "public, max-age=60",
        "ETag": '"CKih16GjycICEAE="',
        "Last-Modified": "Tue, 02 Jan 2024 03:04:05 GMT",
    }


def test_headers_fall_back_for_sparse_metadata(store, bucket):
    bucket.get_blob.return_value = _blob(content_type=None, size=None, cache_control=None, etag=None,
                                         updated=None, content_encoding="gzip")
    headers = store.open_object("file.txt").headers
    assert headers == {"Content-Type": "application/octet-stream", "Content-Encoding": "gzip"}


def test_chunks_stream_raw_and_close_reader(store, bucket):
    blob = _blob()
    reader = blob.open.return_value
    reader.read.side_effect = [b"hell", b"o wo", b"rld", b""]
    bucket.get_blob.return_value = blob

    obj = store.open_object("file.txt")
    blob.open.assert_not_called()  # bytes are read lazily
    assert b"".join(obj.chunks) == b"hello world"
    blob.open.assert_called_once_with("rb", chunk_size=4, raw_download=True)
    reader.close.assert_called_once()


def test_abandoned_stream_closes_reader(store, bucket):
    blob = _blob()
    reader = blob.open.return_value
    reader.read.side_effect = [b"hell", b"o wo", b"rld", b""]
    bucket.get_blob.return_value = blob

    chunks = store.open_object("file.txt").chunks
    assert next(chunks) == b"hell"
    chunks.close()  # what happens when the client disconnects
    reader.close.assert_called_once()


def test_missing_blob_is_not_found(store, bucket):
    bucket.get_blob.return_value = None
    with pytest.raises(ObjectNotFound):
        store.open_object("missing.txt")


def test_missing_bucket_is_not_found(store, bucket):
    bucket.get_blob.side_effect = NotFound("bucket does not exist")
    with pytest.raises(ObjectNotFound):
        store.open_object("file.txt")


@pytest.mark.parametrize("exc", [Forbidden("denied"), Unauthorized("who are you")])
def test_permission_errors_are_access_denied(store, bucket, exc):
    bucket.get_blob.side_effect = exc
    with pytest.raises(AccessDenied) as excinfo:
        store.open_object("file.txt")
    assert excinfo.value.status_code == 403


@pytest.mark.parametrize("exc", [
    ServiceUnavailable("try later"),
    RetryError("deadline", cause=None),
    RefreshError("metadata server unreachable"),
    TransportError("connection reset"),
])
def test_other_backend_errors_are_unavailable(store, bucket, exc):
    bucket.get_blob.side_effect = exc
    with pytest.raises(BackendUnavailable) as excinfo:
        store.open_object("file.txt")
    assert excinfo.value.status_code == 502


@pytest.mark.parametrize("exc", [ServiceUnavailable("connection reset"), RefreshError("token expired")])
def test_failure_mid_stream(store, bucket, exc):
    blob = _blob()
    reader = blob.open.return_value
    reader.read.side_effect = [b"hell", exc]
    bucket.get_blob.return_value = blob

    chunks = store.open_object("file.txt").chunks
    assert next(chunks) == b"hell"
    with pytest.raises(BackendUnavailable):
        next(chunks)
    reader.close.assert_called_once()


def test_describe(store):
    assert store.describe() == "gcs (gs://my-bucket)"
