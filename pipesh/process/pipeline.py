"""
Pipeline Orchestrator Module

Runs a two-stage pipeline: the producer's stdout feeds the consumer's
stdin through one Channel.

Descriptor ownership:
- producer keeps only the write end (as stdout)
- consumer keeps only the read end (as stdin)
- the interpreter closes both ends once both children exist, otherwise
  the consumer never sees end-of-stream

Author: pipesh developers
Version: 1.0.0
"""

from typing import Optional, Tuple

from .handle import ProcessHandle
from .launcher import ProcessLauncher
from pipesh.ipc.pipe import Channel
from pipesh.exceptions import ProcessException
from pipesh.logger import Logger, get_logger


class PipelineOrchestrator:
    """
    Spawns and reaps both stages of a Pipeline.

    Example:
        >>> orchestrator = PipelineOrchestrator()
        >>> producer, consumer = orchestrator.run(parser.parse("echo hello | wc"))
    """

    def __init__(self, launcher: Optional[ProcessLauncher] = None):
        self._launcher = launcher or ProcessLauncher()
        self._logger: Logger = get_logger('pipeline')

    @property
    def launcher(self) -> ProcessLauncher:
        return self._launcher

    def run(self, pipeline) -> Tuple[ProcessHandle, ProcessHandle]:
        """
        Execute a pipeline and wait for both stages.

        Args:
            pipeline: Pipeline with non-empty producer and consumer

        Returns:
            Resolved handles for (producer, consumer)

        Raises:
            PipeError: If the channel cannot be created; nothing was spawned
            ForkError: If either stage cannot be spawned; any stage already
                running has been terminated and reaped
            WaitError: If a stage cannot be reaped; the other is still waited for
        """
        channel = Channel.open()
        self._logger.debug(
            "channel opened",
            context={'read_fd': channel.read_fd, 'write_fd': channel.write_fd}
        )

        producer = None
        try:
            producer = self._launcher.spawn(pipeline.producer, rewire=channel.attach_writer)
            consumer = self._launcher.spawn(pipeline.consumer, rewire=channel.attach_reader)
        except ProcessException as e:
            self._logger.error(f"pipeline aborted: {e.message}")
            channel.close()
            if producer is not None:
                self._launcher.terminate(producer)
            raise

        # Both children hold their own copies by now
        channel.close()

        # Either order is correct; producer first matches the data flow
        try:
            self._launcher.wait(producer)
        finally:
            self._launcher.wait(consumer)

        self._logger.info(
            f"pipeline finished: {producer.name} {producer.describe()}, "
            f"{consumer.name} {consumer.describe()}"
        )
        return producer, consumer
