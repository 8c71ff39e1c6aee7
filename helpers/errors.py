from typing import List, Optional

from helpers.models import ObjectIdentifier


class NukeError(Exception): ...


class ConfigError(NukeError): ...


class EnumerationError(NukeError):
    def __init__(self, bucket: str, queued: int = 0):
        super().__init__(
            f"failed to list object versions in {bucket} after {queued} queued"
        )
        self.bucket = bucket
        self.queued = queued


class DeletionError(NukeError):
    def __init__(self, bucket: str, batch_size: int):
        super().__init__(f"delete call for {batch_size} objects in {bucket} failed")
        self.bucket = bucket
        self.batch_size = batch_size


class PipelineError(NukeError):
    """The first fatal error of a run, with whatever was removed before it."""

    def __init__(
        self,
        message: str,
        deleted: int = 0,
        enumerated: int = 0,
        failures: Optional[List[ObjectIdentifier]] = None,
    ):
        super().__init__(message)
        self.deleted = deleted
        self.enumerated = enumerated
        self.failures = failures if failures else []
