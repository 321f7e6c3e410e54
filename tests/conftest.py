"""Pytest configuration and fixtures."""
import os
import pytest
from unittest.mock import MagicMock

from task_runner.models import RunRequest


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables between tests."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


class FakeClock:
    """Virtual time: sleeping only advances the counter."""

    def __init__(self):
        self.current = 0.0
        self.sleeps = []

    def now(self):
        return self.current

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.current += seconds


@pytest.fixture
def fake_clock():
    """Return a clock that never really sleeps."""
    return FakeClock()


@pytest.fixture
def task_arn():
    return 'arn:aws:ecs:us-east-1:123456789012:task/prod/0123456789abcdef'


@pytest.fixture
def run_request():
    """Return the migration run used across tests."""
    return RunRequest(
        task_name='migrate-db',
        cluster='prod',
        count=1,
        wait=True,
        timeout=30,
        poll_interval=5,
        subnet_ids=['subnet-a'],
        sg_ids=['sg-a']
    )


@pytest.fixture
def ec2_client():
    """Return a fake EC2 client with one security group and one subnet."""
    client = MagicMock()
    client.describe_security_groups.return_value = {
        'SecurityGroups': [{'GroupId': 'sg-a', 'GroupName': 'migrations'}]
    }
    client.describe_subnets.return_value = {
        'Subnets': [{'SubnetId': 'subnet-a'}]
    }
    return client


@pytest.fixture
def ecs_client(task_arn):
    """Return a fake ECS client whose task stops on the second check with exit code 0."""
    client = MagicMock()
    client.describe_clusters.return_value = {
        'clusters': [{'clusterName': 'prod', 'status': 'ACTIVE'}]
    }
    client.run_task.return_value = {
        'tasks': [{'taskArn': task_arn, 'lastStatus': 'PROVISIONING'}],
        'failures': []
    }
    running = {'tasks': [{'taskArn': task_arn, 'lastStatus': 'RUNNING'}]}
    stopped = {
        'tasks': [{
            'taskArn': task_arn,
            'lastStatus': 'STOPPED',
            'stoppedReason': 'Essential container in task exited',
            'containers': [{'name': 'migrate-db', 'exitCode': 0, 'reason': 'Completed'}]
        }]
    }
    client.describe_tasks.side_effect = [running, stopped, stopped]
    return client
