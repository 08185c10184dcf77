import base64
import binascii
import logging
from uuid import uuid4

from botocore.exceptions import ClientError

from common.utils.custom_exceptions import InvalidInput

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def decode_data_url(data: str) -> tuple[bytes, str]:
    """Split a base64 data URL (or bare base64 payload) into bytes and content type."""
    content_type = "image/jpeg"
    if data.startswith("data:"):
        header, _, data = data.partition(",")
        content_type = header[5:].split(";", 1)[0] or content_type
    if content_type not in CONTENT_TYPES:
        raise InvalidInput(f"Unsupported image type {content_type}")
    try:
        return base64.b64decode(data, validate=True), content_type
    except (binascii.Error, ValueError):
        raise InvalidInput("Images must be base64 encoded")


class ImageStorageService:
    def __init__(self, s3_client, bucket: str, region: str):
        self.s3 = s3_client
        self.bucket = bucket
        self.region = region

    def upload_images(self, images: list[str], prefix: str) -> list[str]:
        return [self.upload_image(image, prefix) for image in images]

    def upload_image(self, image: str, prefix: str) -> str:
        if image.startswith("https://"):
            return image
        payload, content_type = decode_data_url(image)
        key = f"{prefix}/{uuid4().hex}.{CONTENT_TYPES[content_type]}"
        try:
            self.s3.put_object(
                Bucket=self.bucket, Key=key, Body=payload, ContentType=content_type
            )
        except ClientError as err:
            logger.error("Error uploading image %s: %s", key, err)
            raise
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
