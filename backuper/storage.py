"""
Object storage access through a minio client.

The Minio client is safe to share between threads, so a single Uploader
serves every concurrent run.
"""
from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError

from .config import ConfigError
from .errors import BucketError, UploadError
from .logging import getLogger

LOG = getLogger(__name__)

_CLIENT_ERRORS = (MinioException, HTTPError, OSError, ValueError)


def newClient(storage):
    try:
        return Minio(
            endpoint=storage.endpoint,
            access_key=storage.accessKey,
            secret_key=storage.secretKey,
            secure=storage.secure,
            region=storage.region)
    except ValueError as err:
        raise ConfigError(
            "invalid storage endpoint {!r}: {}".format(storage.endpoint, err)) from err


def ensureBucket(client, storage):
    bucket = storage.bucket
    try:
        exists = client.bucket_exists(bucket_name=bucket)
    except _CLIENT_ERRORS as err:
        raise BucketError(
            "error checking if bucket {!r} exists: {}".format(bucket, err)) from err
    if exists:
        LOG.debug("bucket %s exists", bucket)
        return False

    if not storage.autoCreateBucket:
        raise BucketError("bucket {!r} does not exist".format(bucket))

    LOG.warning("bucket %s does not exist, creating it", bucket)
    try:
        client.make_bucket(bucket_name=bucket, location=storage.region)
    except _CLIENT_ERRORS as err:
        raise BucketError(
            "error creating bucket {!r}: {}".format(bucket, err)) from err
    LOG.info("bucket created bucket=%s region=%s", bucket, storage.region)
    return True


class Uploader(object):
    def __init__(self, client, bucket):
        self._client = client
        self.bucket = bucket

    def upload(self, artifact):
        try:
            self._client.fput_object(
                bucket_name=artifact.bucket,
                object_name=artifact.objectKey,
                file_path=artifact.sourcePath,
                content_type=artifact.contentType)
        except _CLIENT_ERRORS as err:
            raise UploadError(
                "error uploading file to object storage: {}".format(err)) from err
