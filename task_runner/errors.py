"""Fatal failures of a task run. None of these are retried."""
from task_runner.models import RunStage


class TaskRunError(Exception):
    """A stage of the run failed; carries the stage and the offending identifier."""

    stage = RunStage.INIT
    message = 'Task run failed'

    def __init__(self, identifier: str, detail: str = ''):
        self.identifier = identifier
        self.detail = detail
        text = f'{self.message}: "{identifier}"'
        if detail:
            text = f'{text} ({detail})'
        super().__init__(text)


class ClusterNotFound(TaskRunError):
    stage = RunStage.VALIDATING
    message = 'Cluster not found'


class TaskCreationError(TaskRunError):
    stage = RunStage.LAUNCHING
    message = "Task couldn't be created"


class WaitTimeout(TaskRunError):
    stage = RunStage.WAITING
    message = 'Timed out waiting for task to stop'


class TaskStateError(TaskRunError):
    stage = RunStage.EXTRACTING
    message = "Couldn't fetch final state of task"
