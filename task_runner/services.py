"""boto3-backed collaborators used by the task run pipeline.

Each service takes its client in the constructor so tests can pass a fake.
"""
import boto3


class ClusterRegistry:
    """Looks up ECS clusters by name."""

    def __init__(self, ecs_client=None):
        self.ecs = ecs_client or boto3.client('ecs')

    def describe(self, names: list) -> list:
        response = self.ecs.describe_clusters(clusters=names)
        return response.get('clusters', [])


class NetworkDirectory:
    """Looks up security groups and subnets in EC2."""

    def __init__(self, ec2_client=None):
        self.ec2 = ec2_client or boto3.client('ec2')

    def describe_security_groups(self, filters=None, ids=None, names=None) -> list:
        params = _present(Filters=filters, GroupIds=ids, GroupNames=names)
        response = self.ec2.describe_security_groups(**params)
        return response.get('SecurityGroups', [])

    def describe_subnets(self, filters=None, ids=None) -> list:
        params = _present(Filters=filters, SubnetIds=ids)
        response = self.ec2.describe_subnets(**params)
        return response.get('Subnets', [])


class TaskOrchestration:
    """Launches and inspects ECS tasks."""

    def __init__(self, ecs_client=None):
        self.ecs = ecs_client or boto3.client('ecs')

    def launch(self, request: dict) -> dict:
        return self.ecs.run_task(**request)

    def describe(self, cluster: str, task_arns: list) -> dict:
        return self.ecs.describe_tasks(cluster=cluster, tasks=task_arns)

    def tasks_stopped(self, cluster: str, task_arns: list) -> bool:
        """Check once whether every task has reached STOPPED.

        Mirrors the acceptor of the boto3 ``tasks_stopped`` waiter. A task
        reported as MISSING has not stopped yet as far as we can tell.
        """
        response = self.describe(cluster, task_arns)
        tasks = response.get('tasks', [])
        if len(tasks) < len(set(task_arns)):
            return False
        return all(task.get('lastStatus') == 'STOPPED' for task in tasks)


def _present(**params) -> dict:
    # boto3 rejects None for list parameters, so absent selectors are dropped.
    return {key: value for key, value in params.items() if value}
