"""Optional pre-check that the target cluster exists."""
from task_runner import console
from task_runner.errors import ClusterNotFound


def check_cluster(registry, cluster: str, enabled: bool = True):
    """Fail fast when the cluster is missing.

    Args:
        registry: ClusterRegistry used for the lookup.
        cluster: Exact cluster name to look for.
        enabled: When False the check is skipped and the cluster is assumed valid.

    Raises:
        ClusterNotFound: If no cluster with exactly this name is returned.
    """
    if not enabled:
        return

    clusters = registry.describe([cluster])
    if not any(found.get('clusterName') == cluster for found in clusters):
        console.error(f'Error: cluster "{cluster}" not found! Check out params!')
        raise ClusterNotFound(cluster)

    console.info(f'Cluster "{cluster}" found')
