"""
S3-compatible object storage system backed by aioboto3.
"""

import logging
from typing import List, Dict, Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from oiobench.configuration import (
    CONNECT_TIMEOUT_SECONDS,
    READ_TIMEOUT_SECONDS,
    POOL_CONNECTIONS_HEADROOM,
    MULTIPART_PART_SIZE,
    DEFAULT_NUM_JOBS,
)
from oiobench.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


def _log_client_error(action: str, key: str, error: ClientError) -> None:
    error_code = error.response.get('Error', {}).get('Code', 'Unknown')
    status_code = error.response.get('ResponseMetadata', {}).get('HTTPStatusCode', 0)

    # Highlight throttling errors
    if status_code in (429, 503):
        logger.error(f"Throttling detected: {error_code} (HTTP {status_code}) while trying to {action} {key}")
    else:
        logger.error(f"S3 error {error_code} (HTTP {status_code}) while trying to {action} {key}")


class S3System(ObjectStorageSystem):
    """S3 object storage system with a pooled async client."""

    service_type = "s3"
    addressing_style = "auto"

    def __init__(
        self,
        endpoint: str,
        bucket_name: str,
        credentials: dict,
        prefix: str = "",
        max_connections: int = None,
        virtual_hosted_style: bool = False,
    ):
        super().__init__(prefix)
        self.endpoint = endpoint
        self.bucket_name = bucket_name
        self.credentials = credentials
        self.max_connections = max_connections or DEFAULT_NUM_JOBS
        if virtual_hosted_style:
            self.addressing_style = "virtual"

        self._config = self._create_config()

        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id"),
            aws_secret_access_key=credentials.get("secret_access_key"),
            region_name=credentials.get("region_name"),
        )

        self.client = None
        self._client_context = None

        logger.info(
            f"Initialized {self.service_type} storage for {endpoint or 'default endpoint'} "
            f"(bucket={bucket_name}, max_pool_connections={self._config.max_pool_connections})"
        )

    def _create_config(self) -> Config:
        """Create the botocore config shared by every request."""
        return Config(
            # One connection per worker plus a little headroom for staging and cleanup
            max_pool_connections=self.max_connections + POOL_CONNECTIONS_HEADROOM,
            connect_timeout=CONNECT_TIMEOUT_SECONDS,
            read_timeout=READ_TIMEOUT_SECONDS,
            # The benchmark owns its retry policy, botocore must not retry behind it
            retries={
                'max_attempts': 1,
                'mode': 'standard',
            },
            s3={
                'addressing_style': self.addressing_style,
            },
            tcp_keepalive=True,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self._client_context = self.session.client(
            "s3",
            endpoint_url=self.endpoint or None,
            config=self._config,
        )
        self.client = await self._client_context.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client_context is not None:
            await self._client_context.__aexit__(exc_type, exc_val, exc_tb)
        self._client_context = None
        self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")
        return self.client

    async def read(self, key: str) -> int:
        client = self._require_client()
        path = self.object_path(key)
        try:
            response = await client.get_object(Bucket=self.bucket_name, Key=path)
            body = response["Body"]
            data = await body.read()
        except ClientError as e:
            _log_client_error("read", path, e)
            raise
        return len(data)

    async def write(self, key: str, payload: bytes) -> int:
        client = self._require_client()
        path = self.object_path(key)
        if len(payload) > MULTIPART_PART_SIZE:
            return await self._write_multipart(path, payload)
        try:
            await client.put_object(Bucket=self.bucket_name, Key=path, Body=payload)
        except ClientError as e:
            _log_client_error("write", path, e)
            raise
        return len(payload)

    async def _write_multipart(self, path: str, payload: bytes) -> int:
        """Upload a large payload as sequential multipart parts."""
        client = self._require_client()
        response = await client.create_multipart_upload(Bucket=self.bucket_name, Key=path)
        upload_id = response["UploadId"]

        try:
            parts: List[Dict[str, Any]] = []
            view = memoryview(payload)
            for part_number, offset in enumerate(range(0, len(payload), MULTIPART_PART_SIZE), start=1):
                chunk = view[offset:offset + MULTIPART_PART_SIZE]
                etag = await self._upload_single_part(path, upload_id, part_number, bytes(chunk))
                parts.append({"ETag": etag, "PartNumber": part_number})

            await client.complete_multipart_upload(
                Bucket=self.bucket_name,
                Key=path,
                UploadId=upload_id,
                MultipartUpload={"Parts": parts},
            )
        except ClientError as e:
            _log_client_error("write", path, e)
            await self._abort_multipart(path, upload_id)
            raise
        except BaseException:
            await self._abort_multipart(path, upload_id)
            raise

        logger.debug(f"Uploaded {path} in {len(parts)} parts")
        return len(payload)

    async def _upload_single_part(
        self, path: str, upload_id: str, part_number: int, part_data: bytes
    ) -> str:
        """Upload a single part and return its ETag."""
        response = await self.client.upload_part(
            Bucket=self.bucket_name,
            Key=path,
            PartNumber=part_number,
            UploadId=upload_id,
            Body=part_data,
        )
        return response["ETag"]

    async def _abort_multipart(self, path: str, upload_id: str) -> None:
        try:
            await self.client.abort_multipart_upload(
                Bucket=self.bucket_name, Key=path, UploadId=upload_id
            )
        except ClientError as e:
            logger.warning(f"Failed to abort multipart upload {upload_id} for {path}: {e}")

    async def delete(self, key: str) -> None:
        client = self._require_client()
        path = self.object_path(key)
        try:
            await client.delete_object(Bucket=self.bucket_name, Key=path)
        except ClientError as e:
            _log_client_error("delete", path, e)
            raise

    async def verify_connection(self) -> bool:
        """Verify storage connection and configuration."""
        client = self._require_client()
        try:
            logger.info("Verifying storage connection...")
            await client.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            _log_client_error("access bucket", self.bucket_name, e)
            return False
        logger.info(f"Connected to bucket {self.bucket_name} at {self.endpoint or 'default endpoint'}")
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint='{self.endpoint}', bucket='{self.bucket_name}')"


class MinioSystem(S3System):
    """MinIO object storage system, addressed path-style."""

    service_type = "minio"
    addressing_style = "path"


class OssSystem(S3System):
    """Alibaba Cloud OSS through its S3-compatible API, which requires virtual-hosted addressing."""

    service_type = "oss"
    addressing_style = "virtual"
