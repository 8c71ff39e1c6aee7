import asyncio
from typing import Optional

from helpers.errors import EnumerationError
from storage.s3 import S3Backend


class Enumerator:
    def __init__(
        self,
        service: S3Backend,
        bucket: str,
        output: asyncio.Queue,
        prefix: Optional[str] = None,
        debug: bool = False,
    ):
        self.service = service
        self.bucket = bucket
        self.output = output
        self.prefix = prefix
        self.debug = debug
        self.queued = 0
        self.pages = 0

    async def run(self) -> int:
        """
        Push every version and delete marker identifier in the bucket onto the
        output queue, in the order the backend lists them.

        Pages until the backend returns no key marker AND no version marker.
        The output queue is always shut down on the way out, nobody else does it.
        Returns the number of identifiers queued.
        """
        key_marker: Optional[str] = None
        version_id_marker: Optional[str] = None

        try:
            while True:
                try:
                    versions, next_key, next_version = (
                        await self.service.list_object_versions(
                            self.bucket, key_marker, version_id_marker, self.prefix
                        )
                    )
                except Exception as e:
                    raise EnumerationError(self.bucket, self.queued) from e
                self.pages += 1

                for version in versions:
                    await self.output.put(version.identifier)
                    self.queued += 1

                if self.debug:
                    print(
                        f"[NUKE] {self.bucket}: page {self.pages} queued {len(versions)} (total {self.queued})"
                    )

                if next_key is None and next_version is None:
                    break

                if next_key is None or next_version is None:
                    print(
                        f"[WARN] {self.bucket}: listing returned key marker {next_key!r} "
                        f"and version marker {next_version!r}, continuing"
                    )

                if next_key is not None:
                    key_marker = next_key
                if next_version is not None:
                    version_id_marker = next_version
        finally:
            self.output.shutdown()

        return self.queued


async def queue_object_versions(
    service: S3Backend, bucket: str, output: asyncio.Queue, prefix: Optional[str] = None
) -> int:
    return await Enumerator(service, bucket, output, prefix).run()
