"""
Pipeline tests: the channel and the two-stage orchestrator.
"""

import errno
import os
import signal
import threading
import unittest
from unittest import mock

from pipesh.exceptions import (
    ForkError,
    PipeError,
    RedirectionError,
    WaitError,
    EXIT_NOT_FOUND,
)
from pipesh.ipc.pipe import Channel
from pipesh.process.launcher import ProcessLauncher
from pipesh.process.pipeline import PipelineOrchestrator
from pipesh.process.states import ProcessState
from pipesh.shell.parser import CommandParser, Command, Pipeline
from pipesh.tests.support import captured_fd, open_fd_count, has_proc_fd



class RecordingLauncher(ProcessLauncher):
    """Launcher that keeps every handle it spawns."""

    def __init__(self):
        super().__init__()
        self.handles = []

    def spawn(self, command, rewire=None):
        handle = super().spawn(command, rewire)
        self.handles.append(handle)
        return handle


class WatchedLauncher(RecordingLauncher):
    """Kills children that outlive a deadline so a hung pipeline fails instead."""

    def __init__(self, deadline: float):
        super().__init__()
        self._deadline = deadline
        self._timers = []

    def spawn(self, command, rewire=None):
        handle = super().spawn(command, rewire)
        timer = threading.Timer(self._deadline, _kill_quietly, (handle.pid,))
        timer.daemon = True
        timer.start()
        self._timers.append(timer)
        return handle

    def cancel(self):
        for timer in self._timers:
            timer.cancel()


class FailingWaitLauncher(RecordingLauncher):
    """Reaps normally but reports a wait failure for the first stage."""

    def wait(self, handle):
        super().wait(handle)
        if handle is self.handles[0]:
            raise WaitError("waitpid failed: No child processes", pid=handle.pid)
        return handle


def _kill_quietly(pid):
    try:
        os.kill(pid, signal.SIGKILL)
    except ProcessLookupError:
        pass

class TestChannel(unittest.TestCase):
    """Test the pipe wrapper."""

    def test_open_and_close(self):
        """Both ends are open until closed, and close is idempotent."""
        channel = Channel.open()
        self.assertIsNotNone(channel.read_fd)
        self.assertIsNotNone(channel.write_fd)
        self.assertFalse(channel.closed)

        channel.close()
        self.assertTrue(channel.closed)
        channel.close()
        self.assertTrue(channel.closed)

    def test_bytes_flow_one_way(self):
        """Bytes written to the write end come out of the read end."""
        with Channel.open() as channel:
            os.write(channel.write_fd, b'hello\n')
            channel.close_write()
            self.assertEqual(os.read(channel.read_fd, 100), b'hello\n')
            # Every writer closed: end of stream
            self.assertEqual(os.read(channel.read_fd, 100), b'')
        self.assertTrue(channel.closed)

    def test_close_single_end(self):
        """Closing one end leaves the other usable."""
        channel = Channel.open()
        channel.close_read()
        self.assertIsNone(channel.read_fd)
        self.assertIsNotNone(channel.write_fd)
        channel.close()

    def test_open_failure(self):
        """A kernel refusal becomes PipeError."""
        failure = OSError(errno.EMFILE, os.strerror(errno.EMFILE))
        with mock.patch('os.pipe', side_effect=failure):
            with self.assertRaises(PipeError) as ctx:
                Channel.open()
        self.assertEqual(ctx.exception.errno, errno.EMFILE)

    def test_attach_closed_channel(self):
        """Attaching an end that is already closed is a redirection error."""
        channel = Channel.open()
        channel.close()
        with self.assertRaises(RedirectionError) as ctx:
            channel.attach_reader()
        self.assertEqual(ctx.exception.stream, 'stdin')


class TestPipelineOrchestrator(unittest.TestCase):
    """Test running two-stage pipelines."""

    def setUp(self):
        self.parser = CommandParser()
        self.orchestrator = PipelineOrchestrator()

    def run_line(self, line):
        return self.orchestrator.run(self.parser.parse(line))

    def test_echo_into_wc(self):
        """The producer's output is exactly the consumer's input."""
        with captured_fd(1) as out:
            producer, consumer = self.run_line('echo hello | wc')

        self.assertTrue(producer.succeeded)
        self.assertTrue(consumer.succeeded)
        self.assertEqual(out.text.split(), ['1', '1', '6'])

    def test_multiline_stream(self):
        """Consumer sees every line and then end-of-stream."""
        with captured_fd(1) as out:
            self.run_line('printf a\\nb\\nc\\n | wc -l')
        self.assertEqual(out.text.strip(), '3')

    def test_consumer_sees_end_of_stream(self):
        """cat finishes once the producer exits."""
        with captured_fd(1) as out:
            producer, consumer = self.run_line('echo data | cat')

        self.assertEqual(out.text, 'data\n')
        self.assertIs(consumer.state, ProcessState.EXITED)

    def test_missing_producer(self):
        """A missing program fails only its own stage."""
        with captured_fd(1) as out, captured_fd(2) as err:
            producer, consumer = self.run_line('pipesh-no-such-program | wc -c')

        self.assertEqual(producer.exit_code, EXIT_NOT_FOUND)
        self.assertTrue(consumer.succeeded)
        self.assertEqual(out.text.strip(), '0')
        self.assertIn('command not found', err.text)

    def test_producer_dies_when_consumer_exits(self):
        """An early-exiting consumer ends the producer with SIGPIPE."""
        with captured_fd(1) as out, captured_fd(2) as err:
            producer, consumer = self.run_line('yes | head -1')

        self.assertEqual(out.text, 'y\n')
        self.assertTrue(consumer.succeeded)
        self.assertIs(producer.state, ProcessState.SIGNALED)
        self.assertEqual(producer.term_signal, signal.SIGPIPE)
        self.assertNotIn('Broken pipe', err.text)

    def test_endless_producer_does_not_hang(self):
        """A producer that never checks its writes still ends with the consumer."""
        launcher = WatchedLauncher(deadline=10)
        pipeline = Pipeline(
            Command(('sh', '-c', 'while :; do echo y; done')),
            Command(('head', '-1')),
        )

        try:
            with captured_fd(1) as out, captured_fd(2):
                producer, consumer = PipelineOrchestrator(launcher).run(pipeline)
        finally:
            launcher.cancel()

        self.assertEqual(out.text, 'y\n')
        self.assertTrue(consumer.succeeded)
        self.assertIs(producer.state, ProcessState.SIGNALED)
        self.assertEqual(producer.term_signal, signal.SIGPIPE)

    def test_wait_failure_still_reaps_consumer(self):
        """If the producer cannot be waited for, the consumer is reaped anyway."""
        launcher = FailingWaitLauncher()

        with self.assertRaises(WaitError):
            PipelineOrchestrator(launcher).run(self.parser.parse('true | true'))

        producer, consumer = launcher.handles
        self.assertTrue(consumer.resolved)
        with self.assertRaises(ChildProcessError):
            os.waitpid(consumer.pid, os.WNOHANG)

    def test_both_handles_resolved(self):
        """Both stages are reaped before run() returns."""
        producer, consumer = self.run_line('true | true')
        for handle in (producer, consumer):
            self.assertTrue(handle.resolved)
            with self.assertRaises(ChildProcessError):
                os.waitpid(handle.pid, os.WNOHANG)

    @unittest.skipUnless(has_proc_fd(), "needs /proc/self/fd")
    def test_no_descriptor_leak(self):
        """Repeated pipelines leave no channel descriptors behind."""
        self.run_line('true | true')
        before = open_fd_count()

        for _ in range(100):
            self.run_line('true | true')

        self.assertEqual(open_fd_count(), before)

    @unittest.skipUnless(has_proc_fd(), "needs /proc/self/fd")
    def test_second_spawn_failure(self):
        """If the consumer cannot be spawned the producer is killed and reaped."""
        real_fork = os.fork
        spawned = []

        def fork_once():
            if spawned:
                raise OSError(errno.EAGAIN, os.strerror(errno.EAGAIN))
            pid = real_fork()
            if pid:
                spawned.append(pid)
            return pid

        before = open_fd_count()
        pipeline = Pipeline(Command(('sleep', '10')), Command(('cat',)))

        with mock.patch('os.fork', side_effect=fork_once):
            with self.assertRaises(ForkError):
                self.orchestrator.run(pipeline)

        self.assertEqual(len(spawned), 1)
        with self.assertRaises(ChildProcessError):
            os.waitpid(spawned[0], os.WNOHANG)
        self.assertEqual(open_fd_count(), before)

    def test_channel_failure_spawns_nothing(self):
        """Without a channel no child is created."""
        failure = OSError(errno.EMFILE, os.strerror(errno.EMFILE))
        with mock.patch('os.pipe', side_effect=failure), \
                mock.patch('os.fork') as fork:
            with self.assertRaises(PipeError):
                self.run_line('echo hi | wc')
        fork.assert_not_called()


if __name__ == '__main__':
    unittest.main()
