"""Tests for network lookups."""
import threading

import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError

from task_runner.models import RunRequest
from task_runner.network_resolver import resolve_network
from task_runner.services import NetworkDirectory


class TestNetworkDirectory:
    """Tests for the EC2-backed directory."""

    def test_absent_selectors_are_not_sent(self, ec2_client):
        """Test None selectors are dropped from the EC2 calls."""
        directory = NetworkDirectory(ec2_client)

        directory.describe_security_groups(filters=None, ids=['sg-a'], names=None)
        directory.describe_subnets(filters=None, ids=None)

        ec2_client.describe_security_groups.assert_called_once_with(GroupIds=['sg-a'])
        ec2_client.describe_subnets.assert_called_once_with()

    def test_all_selectors_are_passed_through(self, ec2_client):
        """Test ids, names and filters reach EC2 together."""
        directory = NetworkDirectory(ec2_client)
        filters = [{'Name': 'vpc-id', 'Values': ['vpc-1']}]

        directory.describe_security_groups(filters=filters, ids=['sg-a'], names=['web'])

        ec2_client.describe_security_groups.assert_called_once_with(
            Filters=filters, GroupIds=['sg-a'], GroupNames=['web']
        )

    def test_missing_key_in_response(self):
        """Test a response without the list key gives an empty list."""
        client = MagicMock()
        client.describe_subnets.return_value = {}

        assert NetworkDirectory(client).describe_subnets(ids=['subnet-a']) == []


class TestResolveNetwork:
    """Tests for the concurrent network resolver."""

    def test_returns_service_ids(self, ec2_client):
        """Test resolved ids are exactly what EC2 returned."""
        ec2_client.describe_security_groups.return_value = {
            'SecurityGroups': [{'GroupId': 'sg-1'}, {'GroupId': 'sg-2'}]
        }
        ec2_client.describe_subnets.return_value = {
            'Subnets': [{'SubnetId': 'subnet-1'}, {'SubnetId': 'subnet-2'}]
        }
        request = RunRequest(
            task_name='job',
            sg_names=['web'],
            subnet_filters=[{'Name': 'tag:tier', 'Values': ['private']}]
        )

        network = resolve_network(NetworkDirectory(ec2_client), request)

        assert network.security_group_ids == ['sg-1', 'sg-2']
        assert network.subnet_ids == ['subnet-1', 'subnet-2']
        ec2_client.describe_security_groups.assert_called_once_with(GroupNames=['web'])
        ec2_client.describe_subnets.assert_called_once_with(
            Filters=[{'Name': 'tag:tier', 'Values': ['private']}]
        )

    @pytest.mark.parametrize('response', [
        {},
        {'SecurityGroups': [], 'Subnets': []},
        {'SecurityGroups': [{'GroupName': 'no-id'}], 'Subnets': [{'SubnetId': ''}]},
    ])
    def test_empty_result_is_unspecified(self, response):
        """Test an empty or id-less response yields None instead of an error."""
        client = MagicMock()
        client.describe_security_groups.return_value = response
        client.describe_subnets.return_value = response

        network = resolve_network(NetworkDirectory(client), RunRequest(task_name='job'))

        assert network.security_group_ids is None
        assert network.subnet_ids is None

    def test_lookups_run_concurrently(self):
        """Test both lookups are in flight at the same time."""
        barrier = threading.Barrier(2, timeout=5)
        directory = MagicMock()

        def security_groups(**kwargs):
            barrier.wait()
            return [{'GroupId': 'sg-a'}]

        def subnets(**kwargs):
            barrier.wait()
            return [{'SubnetId': 'subnet-a'}]

        directory.describe_security_groups.side_effect = security_groups
        directory.describe_subnets.side_effect = subnets

        network = resolve_network(directory, RunRequest(task_name='job'))

        assert network.security_group_ids == ['sg-a']
        assert network.subnet_ids == ['subnet-a']

    def test_lookup_failure_propagates(self, ec2_client):
        """Test a failing lookup surfaces as the original error."""
        ec2_client.describe_subnets.side_effect = ClientError(
            {'Error': {'Code': 'InvalidSubnetID.NotFound', 'Message': 'missing'}},
            'DescribeSubnets'
        )

        with pytest.raises(ClientError):
            resolve_network(NetworkDirectory(ec2_client), RunRequest(task_name='job'))

    def test_failure_does_not_wait_for_slow_lookup(self):
        """Test one failed lookup does not block on the other."""
        release = threading.Event()
        directory = MagicMock()

        def slow_security_groups(**kwargs):
            release.wait(5)
            return []

        directory.describe_security_groups.side_effect = slow_security_groups
        directory.describe_subnets.side_effect = RuntimeError('boom')

        try:
            with pytest.raises(RuntimeError):
                resolve_network(directory, RunRequest(task_name='job'))
            assert not release.is_set()
        finally:
            release.set()
