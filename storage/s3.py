from typing import Any, List, Optional, Protocol, Tuple, Union, IO

import aioboto3

from helpers.models import Bucket, ObjectIdentifier, ObjectVersion, MAX_BATCH_SIZE


class S3Backend(Protocol):
    """What the deletion pipeline needs from a storage backend."""

    async def list_object_versions(
        self,
        bucket: str,
        key_marker: Optional[str],
        version_id_marker: Optional[str],
        prefix: Optional[str] = None,
    ) -> Tuple[List[ObjectVersion], Optional[str], Optional[str]]: ...

    async def delete_objects(
        self, bucket: str, objects: List[ObjectIdentifier]
    ) -> List[ObjectIdentifier]: ...


class S3Service:
    def __init__(
        self,
        session: Optional[aioboto3.Session] = None,
        endpoint_url: Optional[str] = None,
        region: Optional[str] = None,
        client: Any = None,
        debug: bool = False,
    ):
        self.session = session
        self.endpoint_url = endpoint_url
        self.region = region
        self.client = client
        self.debug = debug
        self._client_cm = None

    async def __aenter__(self) -> "S3Service":
        if self.client is None:
            if self.session is None:
                self.session = aioboto3.Session()
            self._client_cm = self.session.client(
                "s3", endpoint_url=self.endpoint_url, region_name=self.region
            )
            self.client = await self._client_cm.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client_cm is not None:
            await self._client_cm.__aexit__(exc_type, exc, tb)
            self._client_cm = None
            self.client = None

    async def get_all_buckets(self) -> List[Bucket]:
        result = await self.client.list_buckets()
        return [
            Bucket(name=b["Name"], creation_date=b.get("CreationDate"))
            for b in result.get("Buckets", [])
        ]

    async def get_bucket_region(self, bucket: str) -> str:
        result = await self.client.get_bucket_location(Bucket=bucket)
        region = result.get("LocationConstraint")
        # buckets in us-east-1 report no constraint, very old EU buckets report "EU"
        if not region:
            return "us-east-1"
        if region == "EU":
            return "eu-west-1"
        return region

    async def list_object_versions(
        self,
        bucket: str,
        key_marker: Optional[str],
        version_id_marker: Optional[str],
        prefix: Optional[str] = None,
    ) -> Tuple[List[ObjectVersion], Optional[str], Optional[str]]:
        params = {"Bucket": bucket}
        if key_marker is not None:
            params["KeyMarker"] = key_marker
        if version_id_marker is not None:
            params["VersionIdMarker"] = version_id_marker
        if prefix:
            params["Prefix"] = prefix

        result = await self.client.list_object_versions(**params)

        versions = [
            ObjectVersion(
                identifier=ObjectIdentifier(key=v["Key"], version=v.get("VersionId")),
                is_delete_marker=False,
            )
            for v in result.get("Versions", [])
        ]
        versions.extend(
            ObjectVersion(
                identifier=ObjectIdentifier(key=m["Key"], version=m.get("VersionId")),
                is_delete_marker=True,
            )
            for m in result.get("DeleteMarkers", [])
        )
        return (
            versions,
            result.get("NextKeyMarker"),
            result.get("NextVersionIdMarker"),
        )

    async def delete_objects(
        self, bucket: str, objects: List[ObjectIdentifier]
    ) -> List[ObjectIdentifier]:
        if len(objects) > MAX_BATCH_SIZE:
            raise ValueError(
                f"cannot delete {len(objects)} objects in one call (max {MAX_BATCH_SIZE})"
            )
        if not objects:
            return []

        result = await self.client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": [obj.to_s3() for obj in objects], "Quiet": False},
        )

        for error in result.get("Errors", []):
            print(
                f"[WARN] Could not delete {error.get('Key')} "
                f"(version: {error.get('VersionId', 'N/A')}): {error.get('Code')} {error.get('Message')}"
            )

        deleted = [
            ObjectIdentifier(key=d["Key"], version=d.get("VersionId"))
            for d in result.get("Deleted", [])
        ]
        if self.debug:
            print(f"[NUKE] {bucket}: {len(deleted)}/{len(objects)} confirmed deleted")
        return deleted

    async def create_bucket_simple(
        self, bucket: str, region: str, versioned: bool = False
    ) -> None:
        params = {"Bucket": bucket, "ACL": "private"}
        # us-east-1 rejects an explicit location constraint
        if region and region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}
        await self.client.create_bucket(**params)

        if versioned:
            await self.client.put_bucket_versioning(
                Bucket=bucket, VersioningConfiguration={"Status": "Enabled"}
            )

    async def put_object_simple(
        self, bucket: str, key: str, body: Union[bytes, str, IO]
    ) -> Tuple[Optional[str], Optional[str]]:
        result = await self.client.put_object(Bucket=bucket, Key=key, Body=body)
        return result.get("ETag"), result.get("VersionId")
