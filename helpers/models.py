from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

# hard limit of a single DeleteObjects request
MAX_BATCH_SIZE = 1000


class ObjectIdentifier(BaseModel):
    # frozen so it can be hashed; identity is the (key, version) pair
    model_config = ConfigDict(frozen=True)

    key: str
    version: Optional[str] = None

    def to_s3(self) -> dict:
        if self.version is None:
            return {"Key": self.key}
        return {"Key": self.key, "VersionId": self.version}


class ObjectVersion(BaseModel):
    """A single entry returned by a version listing."""

    model_config = ConfigDict(frozen=True)

    identifier: ObjectIdentifier
    is_delete_marker: bool = False


class Bucket(BaseModel):
    name: str
    creation_date: Optional[datetime] = None


class PipelineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket: str
    concurrency: int = 10
    queue_size: int = 10000
    progress: bool = True

    @field_validator("bucket")
    @classmethod
    def bucket_not_empty(cls, v: str):
        if not v.strip():
            raise ValueError("bucket name cannot be empty")
        return v

    @field_validator("concurrency", "queue_size")
    @classmethod
    def at_least_one(cls, v: int):
        if v < 1:
            raise ValueError("must be at least 1")
        return v


class PipelineResult(BaseModel):
    deleted: int = 0
    enumerated: int = 0
    # objects the backend accepted a request for but did not confirm
    failures: List[ObjectIdentifier] = Field(default_factory=list)


PipelineState = Literal["IDLE", "RUNNING", "DRAINING", "DONE", "FAILED"]
