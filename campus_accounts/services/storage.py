"""Object storage for profile images, backed by S3."""

from typing import Any, Optional
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import StorageFailed

logger = logging.getLogger(__name__)


class ObjectStorage(object):
    """Uploads, deletes and hands out URLs for objects in one bucket."""

    def __init__(self, bucket: str, region: str, access_key_id: str,
                 secret_access_key: str, url_expires: int = 3600,
                 client: Optional[Any] = None) -> None:
        self.bucket = bucket
        self.url_expires = url_expires
        if client is None:
            client = boto3.client(
                's3',
                region_name=region,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key
            )
        self.client = client

    def get_object_url(self, key: str) -> str:
        """Get a presigned URL from which the object can be fetched."""
        try:
            url: str = self.client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=self.url_expires
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageFailed(f'Could not sign URL for {key}: {e}') from e
        return url

    def upload(self, data: bytes, path: str) -> str:
        """Store ``data`` at ``path``. Returns the key of the new object."""
        try:
            self.client.put_object(Bucket=self.bucket, Key=path, Body=data)
        except (BotoCoreError, ClientError) as e:
            raise StorageFailed(f'Could not upload {path}: {e}') from e
        logger.debug('Uploaded %s', path)
        return path

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageFailed(f'Could not delete {key}: {e}') from e
