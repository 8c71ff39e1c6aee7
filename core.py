from typing import List, Optional

import aioboto3
from pydantic import ValidationError

from helpers.config_loader import ConfigType
from helpers.errors import ConfigError
from helpers.models import Bucket, PipelineConfig, PipelineResult
from storage.s3 import S3Service
from workers.pipeline import Pipeline


class NukeApp:
    def __init__(self, config: ConfigType, debug: bool = False):
        self.config: ConfigType = config
        self.debug: bool = debug or config.get("debug", False)

        self.s3_session: aioboto3.Session | None = None
        self.s3_endpoint: str | None = None
        self.s3_region: str | None = None

    def init(self) -> None:
        """Build the aioboto3 session, only passing credentials the config has."""
        s3_config = self.config.get("s3", {})
        session_kwargs = {}
        if s3_config.get("access-key-id"):
            session_kwargs["aws_access_key_id"] = s3_config["access-key-id"]
        if s3_config.get("secret-access-key"):
            session_kwargs["aws_secret_access_key"] = s3_config["secret-access-key"]
        if s3_config.get("location"):
            session_kwargs["region_name"] = s3_config["location"]

        self.s3_session = aioboto3.Session(**session_kwargs)
        self.s3_endpoint = s3_config.get("endpoint") or None
        self.s3_region = s3_config.get("location") or None

    def s3_service_getter(self, region: Optional[str] = None) -> S3Service:
        if not self.s3_session:
            raise RuntimeError("Session not initialized. Call init() first.")
        return S3Service(
            session=self.s3_session,
            endpoint_url=self.s3_endpoint,
            region=region or self.s3_region,
            debug=self.debug,
        )

    def pipeline_config(
        self, bucket: str, concurrency: Optional[int] = None
    ) -> PipelineConfig:
        nuke_config = self.config.get("nuke", {})
        try:
            return PipelineConfig(
                bucket=bucket,
                concurrency=(
                    concurrency
                    if concurrency is not None
                    else nuke_config.get("concurrency", 10)
                ),
                queue_size=nuke_config.get("queue-size", 10000),
                progress=nuke_config.get("progress", True),
            )
        except ValidationError as e:
            raise ConfigError(f"invalid pipeline settings: {e}") from e

    async def get_all_buckets(self) -> List[Bucket]:
        async with self.s3_service_getter() as s3:
            return await s3.get_all_buckets()

    async def get_bucket_region(self, bucket: str) -> str:
        async with self.s3_service_getter() as s3:
            return await s3.get_bucket_region(bucket)

    async def nuke(
        self,
        bucket: str,
        concurrency: Optional[int] = None,
        region: Optional[str] = None,
    ) -> PipelineResult:
        config = self.pipeline_config(bucket, concurrency)
        if self.debug:
            print(
                f"[NUKE] {bucket}: {config.concurrency} workers, queue size {config.queue_size}"
            )
        async with self.s3_service_getter(region) as s3:
            return await Pipeline(s3, config, debug=self.debug).run()
