from botocore.exceptions import ClientError

from agenticv.config import Settings

STORAGE_PUBLIC_BASE_URL = "https://project.storage.example.com/storage/v1/object/public"


class FakeStorageClient:
    """In-memory stand-in for the boto3 S3 client."""

    def __init__(self, *, missing_buckets=(), fail_deletes=False):
        self.objects: dict[tuple[str, str], dict] = {}
        self.put_calls: list[dict] = []
        self.delete_calls: list[tuple[str, str]] = []
        self._missing_buckets = set(missing_buckets)
        self._fail_deletes = fail_deletes

    def put_object(self, **kwargs):
        self.put_calls.append(kwargs)
        if kwargs["Bucket"] in self._missing_buckets:
            raise ClientError(
                {"Error": {"Code": "NoSuchBucket", "Message": "The specified bucket does not exist"}},
                "PutObject",
            )
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = kwargs
        return {"ETag": '"etag"'}

    def delete_object(self, *, Bucket, Key):
        self.delete_calls.append((Bucket, Key))
        if self._fail_deletes:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "DeleteObject")
        self.objects.pop((Bucket, Key), None)
        return {}

    def list_buckets(self):
        buckets = {bucket for bucket, _ in self.objects}
        return {"Buckets": [{"Name": name} for name in sorted(buckets)]}


def make_settings(**overrides) -> Settings:
    values = {
        "storage_bucket": "cv-uploads",
        "storage_public_base_url": STORAGE_PUBLIC_BASE_URL,
        "webhook_urls": {
            "cv-parser": "https://hooks.example.com/webhook/cv-parser",
            "jd-parser": "https://hooks.example.com/webhook/jd-parser",
            "gap-analyzer": None,
            "complete-analysis": "https://hooks.example.com/webhook/get_cvjd",
        },
        "webhook_timeout_seconds": 5.0,
    }
    values.update(overrides)
    return Settings(**values)
