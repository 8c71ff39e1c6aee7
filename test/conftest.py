import asyncio
from typing import Callable, List, Optional

from helpers.models import ObjectIdentifier, ObjectVersion


def make_identifiers(count: int, prefix: str = "") -> List[ObjectIdentifier]:
    return [
        ObjectIdentifier(key=f"{prefix}key{i}", version=f"{prefix}version{i}")
        for i in range(count)
    ]


def make_versions(count: int) -> List[ObjectVersion]:
    # every other entry a delete marker, they get deleted the same way
    return [
        ObjectVersion(identifier=obj, is_delete_marker=i % 2 == 1)
        for i, obj in enumerate(make_identifiers(count))
    ]


class FakeS3Backend:
    """In-memory bucket that pages its versions and records every call."""

    def __init__(
        self,
        versions: Optional[List[ObjectVersion]] = None,
        page_size: int = 1000,
        confirm: Optional[Callable[[List[ObjectIdentifier]], List[ObjectIdentifier]]] = None,
        fail_list_on_page: Optional[int] = None,
        fail_delete_on_call: Optional[int] = None,
        fail_delete: Optional[Callable[[List[ObjectIdentifier]], bool]] = None,
    ):
        self.versions = versions if versions is not None else []
        self.page_size = page_size
        self.confirm = confirm
        self.fail_list_on_page = fail_list_on_page
        self.fail_delete_on_call = fail_delete_on_call
        self.fail_delete = fail_delete

        self.list_calls: List[tuple] = []
        self.delete_calls: List[int] = []
        self.confirmed_total = 0

    async def list_object_versions(self, bucket, key_marker, version_id_marker, prefix=None):
        self.list_calls.append((key_marker, version_id_marker))
        await asyncio.sleep(0)
        if self.fail_list_on_page is not None and len(self.list_calls) == self.fail_list_on_page:
            raise RuntimeError("simulated list failure")

        start = int(key_marker) if key_marker is not None else 0
        end = start + self.page_size
        page = self.versions[start:end]
        if end >= len(self.versions):
            return page, None, None
        return page, str(end), f"v{end}"

    async def delete_objects(self, bucket, objects):
        self.delete_calls.append(len(objects))
        call_number = len(self.delete_calls)
        await asyncio.sleep(0)
        if self.fail_delete_on_call is not None and call_number == self.fail_delete_on_call:
            raise RuntimeError("simulated delete failure")
        if self.fail_delete is not None and self.fail_delete(objects):
            raise RuntimeError("simulated delete failure")

        confirmed = self.confirm(objects) if self.confirm else list(objects)
        self.confirmed_total += len(confirmed)
        return confirmed


class ScriptedListBackend:
    """Returns pre-built pages, each (versions, next_key, next_version)."""

    def __init__(self, pages):
        self.pages = list(pages)
        self.list_calls: List[tuple] = []

    async def list_object_versions(self, bucket, key_marker, version_id_marker, prefix=None):
        self.list_calls.append((key_marker, version_id_marker))
        return self.pages[len(self.list_calls) - 1]


class FakeS3Client:
    """Stands in for an aioboto3 s3 client, returns canned responses."""

    def __init__(self, responses: Optional[dict] = None):
        self.responses = responses or {}
        self.calls: List[tuple] = []

    def _respond(self, name, kwargs):
        self.calls.append((name, kwargs))
        response = self.responses.get(name, {})
        if callable(response):
            return response(**kwargs)
        return response

    async def list_buckets(self, **kwargs):
        return self._respond("list_buckets", kwargs)

    async def get_bucket_location(self, **kwargs):
        return self._respond("get_bucket_location", kwargs)

    async def list_object_versions(self, **kwargs):
        return self._respond("list_object_versions", kwargs)

    async def delete_objects(self, **kwargs):
        return self._respond("delete_objects", kwargs)

    async def create_bucket(self, **kwargs):
        return self._respond("create_bucket", kwargs)

    async def put_bucket_versioning(self, **kwargs):
        return self._respond("put_bucket_versioning", kwargs)

    async def put_object(self, **kwargs):
        return self._respond("put_object", kwargs)
