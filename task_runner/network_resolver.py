"""Resolve security group and subnet ids from selector inputs."""
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from task_runner import console
from task_runner.models import ResolvedNetwork, RunRequest


def resolve_network(directory, request: RunRequest) -> ResolvedNetwork:
    """Look up security groups and subnets concurrently.

    Selectors are passed to EC2 as given; EC2 decides how they combine.
    An empty result becomes None so the launch request can leave the field
    out and let ECS fall back to its defaults.

    Args:
        directory: NetworkDirectory used for both lookups.
        request: The run request holding the selectors.

    Returns:
        ResolvedNetwork: The ids found, or None per list when nothing matched.

    Raises:
        botocore.exceptions.ClientError: If either lookup fails. The other
            lookup is abandoned.
    """
    executor = ThreadPoolExecutor(max_workers=2)
    try:
        sg_future = executor.submit(
            directory.describe_security_groups,
            filters=request.sg_filters,
            ids=request.sg_ids,
            names=request.sg_names,
        )
        subnet_future = executor.submit(
            directory.describe_subnets,
            filters=request.subnet_filters,
            ids=request.subnet_ids,
        )
        done, _ = wait([sg_future, subnet_future], return_when=FIRST_EXCEPTION)
        for future in done:
            future.result()

        security_groups = sg_future.result()
        subnets = subnet_future.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    sg_ids = _ids(security_groups, 'GroupId')
    subnet_ids = _ids(subnets, 'SubnetId')

    console.info(f"SecurityGroups ids: {','.join(sg_ids) if sg_ids else 'empty'}")
    console.info(f"Subnets ids: {','.join(subnet_ids) if subnet_ids else 'empty'}")

    return ResolvedNetwork(security_group_ids=sg_ids, subnet_ids=subnet_ids)


def _ids(items, key):
    ids = [item[key] for item in items or [] if item.get(key)]
    return ids or None
