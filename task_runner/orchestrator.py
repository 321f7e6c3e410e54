"""Sequence the stages of a single task run."""
from task_runner import console
from task_runner.cluster_validator import check_cluster
from task_runner.completion_waiter import CompletionWaiter
from task_runner.ecs_runner import launch_task
from task_runner.models import RunOutcome, RunRequest, RunStage
from task_runner.network_resolver import resolve_network
from task_runner.result_extractor import extract_result
from task_runner.services import ClusterRegistry, NetworkDirectory, TaskOrchestration


class TaskRun:
    """One run: validate, resolve network, launch, optionally wait, read the result.

    Stages only move forward. A failure leaves ``stage`` at the stage that
    failed. A launched task is never stopped by this class, whatever happens
    after the launch.
    """

    def __init__(self, registry=None, directory=None, orchestration=None, clock=None):
        self.registry = registry or ClusterRegistry()
        self.directory = directory or NetworkDirectory()
        self.orchestration = orchestration or TaskOrchestration()
        self.waiter = CompletionWaiter(self.orchestration, clock=clock)
        self.stage = RunStage.INIT
        self.launch = None

    def _enter(self, stage: RunStage):
        if stage.value <= self.stage.value:
            raise RuntimeError(f'Cannot move from {self.stage.name} to {stage.name}')
        self.stage = stage

    def run(self, request: RunRequest) -> RunOutcome:
        """Execute the request.

        Returns:
            RunOutcome: Exit code and reason. Without waiting this is always
            code 0 since the task state is never inspected.

        Raises:
            TaskRunError: If any stage fails. Lookup failures from boto3
                propagate unchanged.
        """
        self._enter(RunStage.VALIDATING)
        check_cluster(self.registry, request.cluster, request.check_cluster_exists)

        self._enter(RunStage.RESOLVING_NETWORK)
        with console.group('Fetch network settings'):
            network = resolve_network(self.directory, request)

        with console.group('Flush task to ECS'):
            self._enter(RunStage.LAUNCHING)
            self.launch = launch_task(self.orchestration, request, network)

            if not request.wait:
                self._enter(RunStage.SKIPPED)
                console.dump('task', self.launch.response)
                self._enter(RunStage.COMPLETED)
                return RunOutcome(
                    exit_code=0,
                    reason='Not waited',
                    task_arn=self.launch.task_arn,
                    waited=False
                )

            self._enter(RunStage.WAITING)
            console.info('Wait until task stopped')
            self.waiter.wait(self.launch, request.poll_interval, request.max_attempts)

            self._enter(RunStage.EXTRACTING)
            console.info('Task stopped. Checkout exit state.')
            outcome = extract_result(self.orchestration, self.launch)

        self._enter(RunStage.COMPLETED)
        console.info(
            f'Run finished. Task stopped with code "{outcome.exit_code}" and reason "{outcome.reason}"'
        )
        return outcome


def run_task(request: RunRequest, **services) -> RunOutcome:
    """Run ``request`` with default boto3 services unless overridden."""
    return TaskRun(**services).run(request)
