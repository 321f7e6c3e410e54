"""ECS task runner for launching the requested task."""
from task_runner import console
from task_runner.errors import TaskCreationError
from task_runner.models import LaunchResult, ResolvedNetwork, RunRequest


def build_run_task_request(request: RunRequest, network: ResolvedNetwork) -> dict:
    """Build the keyword arguments for a single ``ecs.run_task`` call.

    Args:
        request: The run request.
        network: Security group and subnet ids resolved for the task.

    Returns:
        dict: ``run_task`` parameters. ``overrides`` is present only when a
        command or environment override was given, and
        ``capacityProviderStrategy`` only when a capacity provider was given.
    """
    awsvpc_config = {
        'assignPublicIp': 'ENABLED' if request.public_ip else 'DISABLED'
    }
    if network.subnet_ids is not None:
        awsvpc_config['subnets'] = network.subnet_ids
    if network.security_group_ids is not None:
        awsvpc_config['securityGroups'] = network.security_group_ids

    params = {
        'count': request.count,
        'cluster': request.cluster,
        'taskDefinition': request.task_name,
        'networkConfiguration': {
            'awsvpcConfiguration': awsvpc_config
        }
    }

    if request.command or request.environment:
        container_override = {'name': request.override_target}
        if request.command:
            container_override['command'] = list(request.command)
        if request.environment:
            container_override['environment'] = [
                {'name': pair['name'], 'value': pair['value']}
                for pair in request.environment
            ]
        params['overrides'] = {'containerOverrides': [container_override]}

    if request.capacity_provider:
        params['capacityProviderStrategy'] = [{
            'capacityProvider': request.capacity_provider.value,
            'base': request.count,
            'weight': 1
        }]

    return params


def launch_task(orchestration, request: RunRequest, network: ResolvedNetwork) -> LaunchResult:
    """Submit the task exactly once.

    Args:
        orchestration: TaskOrchestration used for the ``run_task`` call.
        request: The run request.
        network: Resolved network placement.

    Returns:
        LaunchResult: ARN of the first launched task and its cluster.

    Raises:
        TaskCreationError: If the response holds no task with an ARN.
    """
    console.info(f'Run task: {request.task_name}')
    response = orchestration.launch(build_run_task_request(request, network))

    tasks = response.get('tasks') or []
    task_arn = tasks[0].get('taskArn') if tasks else None
    if not task_arn:
        console.dump('Run ecs task response', response)
        reasons = ', '.join(
            failure.get('reason', 'unknown') for failure in response.get('failures') or []
        )
        console.error(f'Error: task "{request.task_name}" couldn\'t be created! Check out params!')
        raise TaskCreationError(request.task_name, reasons)

    console.info(f'Launched ECS task {task_arn}')
    return LaunchResult(
        task_arn=task_arn,
        cluster=request.cluster,
        task_name=request.task_name,
        response=response
    )
