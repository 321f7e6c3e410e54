"""Read the exit state of a stopped task."""
from task_runner import console
from task_runner.errors import TaskStateError
from task_runner.models import LaunchResult, RunOutcome

DEFAULT_EXIT_CODE = 1
DEFAULT_REASON = 'Unknown'


def extract_result(orchestration, launch: LaunchResult) -> RunOutcome:
    """Describe the stopped task and read its first container's exit state.

    A container without an exit code never ran to completion, so it counts
    as a failure (exit code 1).

    Raises:
        TaskStateError: If the task can't be found in the describe response.
    """
    response = orchestration.describe(launch.cluster, [launch.task_arn])

    task = next(
        (t for t in response.get('tasks') or [] if t.get('taskArn') == launch.task_arn),
        None
    )
    if task is None:
        name = launch.task_name or launch.task_arn
        console.error(f'Error: task "{name}" couldn\'t fetch current state!')
        raise TaskStateError(name, launch.task_arn)

    console.dump('task', task)

    containers = task.get('containers') or []
    container = containers[0] if containers else {}
    exit_code = container.get('exitCode')
    reason = container.get('reason')

    return RunOutcome(
        exit_code=DEFAULT_EXIT_CODE if exit_code is None else exit_code,
        reason=DEFAULT_REASON if reason is None else reason,
        task_arn=launch.task_arn
    )
