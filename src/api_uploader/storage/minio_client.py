from minio import Minio
from logging import getLogger
from urllib.parse import urlparse

from api_uploader.config.base_config import BaseConfig
from api_uploader.exceptions.exceptions import StorageError

logger = getLogger(__name__)


class MinioClient:
    def __init__(self, config: BaseConfig):
        endpoint = config.MINIO_ENDPOINT
        if not endpoint.startswith(("http://", "https://")):
            endpoint = f"http://{endpoint}"
        parsed = urlparse(endpoint)

        self.client = Minio(
            parsed.netloc,
            access_key=config.MINIO_ACCESS_KEY,
            secret_key=config.MINIO_SECRET_KEY,
            secure=parsed.scheme == "https",
            region=config.MINIO_REGION,
        )
        self.endpoint = endpoint.rstrip("/")
        self.bucket_name = config.MINIO_BUCKET
        self.cdn_distribution = config.CDN_DISTRIBUTION

    def check_bucket_exists(self, bucket_name: str) -> bool:
        return self.client.bucket_exists(bucket_name=bucket_name)

    def upload_file(self, file_path: str, object_name: str, content_type: str):
        try:
            if not self.check_bucket_exists(self.bucket_name):
                self.client.make_bucket(bucket_name=self.bucket_name)

            return self.client.fput_object(
                bucket_name=self.bucket_name,
                object_name=object_name,
                file_path=file_path,
                content_type=content_type,
            )
        except Exception as e:
            logger.error(f"Error uploading {file_path} to {object_name}: {e}")
            raise StorageError(f"Couldn't upload {object_name}: {e}") from e

    def public_url(self, object_name: str) -> str:
        """
        URL the stored object is served from: the CDN distribution when one is
        configured, the bucket path on the storage endpoint otherwise.
        """
        if self.cdn_distribution:
            return f"https://{self.cdn_distribution}/{object_name}"
        return f"{self.endpoint}/{self.bucket_name}/{object_name}"
