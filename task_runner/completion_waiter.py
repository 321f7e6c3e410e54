"""Poll ECS until a launched task stops."""
import time

from task_runner import console
from task_runner.errors import WaitTimeout
from task_runner.models import LaunchResult


class SystemClock:
    """Wall-clock time."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float):
        time.sleep(seconds)


class CompletionWaiter:
    """Checks the stop condition every ``poll_interval`` seconds.

    At most ``max_attempts`` checks are made. The clock is injectable so
    tests can run on virtual time.
    """

    def __init__(self, orchestration, clock=None):
        self.orchestration = orchestration
        self.clock = clock or SystemClock()

    def wait(self, launch: LaunchResult, poll_interval: float, max_attempts: int) -> int:
        """Block until the task is STOPPED.

        Returns:
            int: Number of checks it took.

        Raises:
            WaitTimeout: If the task was not seen stopped within ``max_attempts`` checks.
        """
        started = self.clock.now()
        tasks = [launch.task_arn]

        for attempt in range(1, max_attempts + 1):
            if self.orchestration.tasks_stopped(launch.cluster, tasks):
                console.info(f'Task stopped after {self.clock.now() - started:.0f}s')
                return attempt
            if attempt < max_attempts:
                self.clock.sleep(poll_interval)

        name = launch.task_name or launch.task_arn
        console.error(f'Error: task "{name}" did not stop after {max_attempts} checks')
        raise WaitTimeout(name, f'{launch.task_arn}, {max_attempts} checks every {poll_interval}s')
