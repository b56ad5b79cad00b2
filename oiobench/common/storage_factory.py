"""
Factory module for creating storage system instances.
"""

import logging

# Suppress boto3/botocore logging before importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)
logging.getLogger('s3transfer').setLevel(logging.CRITICAL)

from oiobench.config import ServiceConfig
from oiobench.configuration import DEFAULT_REGION
from oiobench.systems.base import ObjectStorageSystem
from oiobench.systems.fs import FsSystem
from oiobench.systems.s3 import S3System, MinioSystem, OssSystem

logger = logging.getLogger(__name__)

_S3_COMPATIBLE = {
    "s3": S3System,
    "minio": MinioSystem,
    "oss": OssSystem,
}


def create_storage_system(service: ServiceConfig, max_connections: int = None) -> ObjectStorageSystem:
    """Create and return the storage system described by a service config.

    Args:
        service: Validated service section of the job file
        max_connections: Number of concurrent workers, used to size connection pools

    Returns:
        Storage system instance (S3System, MinioSystem, OssSystem or FsSystem)

    Raises:
        ValueError: If the service type is not supported
    """
    service_type = service.type.lower()

    if service_type == "fs":
        return FsSystem(root=service.prefix)

    system_class = _S3_COMPATIBLE.get(service_type)
    if system_class is None:
        raise ValueError(
            f"Unsupported storage type: {service.type}. "
            f"Must be one of {', '.join(sorted(list(_S3_COMPATIBLE) + ['fs']))}."
        )

    credentials = {
        "access_key_id": service.access_key,
        "secret_access_key": service.secret_key,
        "region_name": service.region or DEFAULT_REGION,
    }
    return system_class(
        endpoint=service.endpoint,
        bucket_name=service.bucket,
        credentials=credentials,
        prefix=service.prefix or "",
        max_connections=max_connections,
        virtual_hosted_style=service.virtual_hosted_style,
    )
