"""Entry points: the automation step (``main``) and a Lambda handler."""
import sys
import traceback

from botocore.exceptions import BotoCoreError, ClientError

from task_runner import console
from task_runner.config_loader import build_request, load_config
from task_runner.errors import TaskRunError
from task_runner.models import RunStage
from task_runner.orchestrator import TaskRun


def handler(event, context):
    """Run one task described by the event.

    Args:
        event: Dict of inputs keyed by lower-case name (same names as the
            ``INPUT_*`` variables).
        context: Lambda context object.

    Returns:
        dict: Response with status code, and exit code/reason when the run
        got that far. Failures are reported, not raised, since a retry
        would launch a second task.
    """
    try:
        request = build_request(event)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return {'statusCode': 400, 'error': str(e)}

    task_run = None
    try:
        task_run = TaskRun()
        outcome = task_run.run(request)
    except TaskRunError as e:
        print(f"Task run failed at {e.stage.name}: {e}")
        return {'statusCode': 500, 'stage': e.stage.name, 'error': str(e)}
    except (BotoCoreError, ClientError) as e:
        stage = _stage(task_run)
        print(f"Task setup failed at {stage} for {request.task_name}: {e}")
        return {'statusCode': 500, 'stage': stage, 'error': str(e)}

    print(f"Task {outcome.task_arn} finished with exit code {outcome.exit_code}")
    return {
        'statusCode': 200,
        'taskArn': outcome.task_arn,
        'exitCode': outcome.exit_code,
        'reason': outcome.reason
    }


def main(environ=None, task_run=None) -> int:
    """Run the task described by ``INPUT_*`` variables.

    Returns:
        int: Process exit status, 0 only when the run succeeded and the
        container exited with 0.
    """
    try:
        request = build_request(load_config(environ))
    except ValueError as e:
        console.error(str(e))
        return 1

    console.info('Run fargate task')
    try:
        task_run = task_run or TaskRun()
        outcome = task_run.run(request)
    except TaskRunError as e:
        console.error(f'{e.stage.name}: {e}')
        console.error('Task setup failed!')
        return 1
    except Exception as e:
        traceback.print_exc()
        console.error(f'{_stage(task_run)} failed for task "{request.task_name}": {e}')
        console.error('Task setup failed!')
        return 1

    if not outcome.succeeded:
        console.error('Task finished with error code')
        return 1

    console.info('Task run finished!')
    return 0


def _stage(task_run):
    return task_run.stage.name if task_run is not None else RunStage.INIT.name


def cli():
    sys.exit(main())


if __name__ == '__main__':
    cli()
