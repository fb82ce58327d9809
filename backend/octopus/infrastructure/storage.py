"""Object Storage - presigned upload URLs for user images (avatars, claim images).

Invariants:
    - Keys are generated server-side: <prefix>/<uuid4><ext>; client filenames only contribute
      the extension
    - URLs expire after aws_presign_expiry_seconds
"""

import os
import uuid

import boto3


class ObjectStorage:
    def __init__(self, bucket: str, region: str, expiry_seconds: int = 900, client=None):
        self.bucket = bucket
        self.region = region
        self.expiry_seconds = expiry_seconds
        self._client = client or boto3.client("s3", region_name=region)

    def new_key(self, filename: str, prefix: str = "images") -> str:
        ext = os.path.splitext(filename)[1].lower()
        return f"{prefix}/{uuid.uuid4().hex}{ext}"

    def presigned_put_url(self, key: str, content_type: str) -> str:
        return self._client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=self.expiry_seconds,
        )

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
