import asyncio
from typing import List, Optional

from helpers.errors import PipelineError
from helpers.models import ObjectIdentifier, PipelineConfig, PipelineResult, PipelineState
from helpers.progress import ProgressSink
from storage.s3 import S3Backend
from workers.deleter import DeletionWorker
from workers.enumerator import Enumerator


class Pipeline:
    """
    One enumerator and `concurrency` deletion workers sharing a bounded queue.

    The first participant to fail cancels everybody else and its error is
    raised as a PipelineError. Cancellation only lands at queue and backend
    awaits, a delete call that is already out is allowed to finish.
    A Pipeline runs once.
    """

    def __init__(
        self,
        service: S3Backend,
        config: PipelineConfig,
        prefix: Optional[str] = None,
        debug: bool = False,
    ):
        self.service = service
        self.config = config
        self.prefix = prefix
        self.debug = debug
        self.state: PipelineState = "IDLE"

        self.enumerator: Optional[Enumerator] = None
        self.workers: List[DeletionWorker] = []

    async def run(self) -> PipelineResult:
        if self.state != "IDLE":
            raise RuntimeError(f"pipeline already used (state: {self.state})")

        bucket = self.config.bucket
        work: asyncio.Queue = asyncio.Queue(maxsize=self.config.queue_size)
        progress: asyncio.Queue = asyncio.Queue()
        failures: asyncio.Queue = asyncio.Queue()

        sink = ProgressSink(progress, enabled=self.config.progress)
        sink_task = asyncio.create_task(sink.run(), name="progress-sink")

        self.enumerator = Enumerator(
            self.service, bucket, work, prefix=self.prefix, debug=self.debug
        )
        self.workers = [
            DeletionWorker(
                self.service, bucket, work, progress=progress, failures=failures, debug=self.debug
            )
            for _ in range(self.config.concurrency)
        ]

        self.state = "RUNNING"
        tasks = [asyncio.create_task(self.enumerator.run(), name="enumerator")]
        tasks += [
            asyncio.create_task(worker.run(), name=f"delete-worker-{i}")
            for i, worker in enumerate(self.workers)
        ]

        # done callbacks fire in completion order, errors[0] is the first failure
        errors: List[BaseException] = []

        def record_error(task: asyncio.Task) -> None:
            if not task.cancelled() and task.exception() is not None:
                errors.append(task.exception())

        for task in tasks:
            task.add_done_callback(record_error)

        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            self.state = "FAILED"
            raise
        finally:
            # first error, or the caller cancelling us: stop everybody still running
            leftover = [task for task in tasks if not task.done()]
            for task in leftover:
                task.cancel()
            if leftover:
                await asyncio.wait(leftover)
            if self.state == "RUNNING":
                self.state = "DRAINING"
            progress.shutdown()
            await sink_task

        error = errors[0] if errors else None
        result = PipelineResult(
            deleted=sum(worker.deleted for worker in self.workers),
            enumerated=self.enumerator.queued,
            failures=self._collect_failures(failures),
        )

        if error is not None:
            self.state = "FAILED"
            raise PipelineError(
                f"nuke of {bucket} failed: {error}",
                deleted=result.deleted,
                enumerated=result.enumerated,
                failures=result.failures,
            ) from error

        self.state = "DONE"
        return result

    @staticmethod
    def _collect_failures(failures: asyncio.Queue) -> List[ObjectIdentifier]:
        collected: List[ObjectIdentifier] = []
        while True:
            try:
                collected.extend(failures.get_nowait())
            except asyncio.QueueEmpty:
                break
        return collected


async def nuke_bucket(service: S3Backend, bucket: str, concurrency: int) -> int:
    config = PipelineConfig(bucket=bucket, concurrency=concurrency, progress=False)
    result = await Pipeline(service, config).run()
    return result.deleted
