"""Data types shared by the task run pipeline."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CapacityProvider(str, Enum):
    FARGATE = 'FARGATE'
    FARGATE_SPOT = 'FARGATE_SPOT'


class RunStage(Enum):
    """Stages of a single task run, in the order they are entered."""
    INIT = 0
    VALIDATING = 1
    RESOLVING_NETWORK = 2
    LAUNCHING = 3
    SKIPPED = 4
    WAITING = 5
    EXTRACTING = 6
    COMPLETED = 7


@dataclass
class RunRequest:
    """Everything needed to launch one task and decide how to wait for it.

    Network selectors are passed through to EC2 as given. Any of them may be
    empty; filters use the EC2 shape ``{'Name': ..., 'Values': [...]}``.
    """
    task_name: str
    cluster: str = 'default'
    count: int = 1
    sg_ids: Optional[list] = None
    sg_names: Optional[list] = None
    sg_filters: Optional[list] = None
    subnet_ids: Optional[list] = None
    subnet_filters: Optional[list] = None
    public_ip: bool = False
    command: Optional[list] = None
    environment: Optional[list] = None
    container_name: Optional[str] = None
    timeout: int = 600
    poll_interval: int = 6
    wait: bool = True
    capacity_provider: Optional[CapacityProvider] = None
    check_cluster_exists: bool = False

    def __post_init__(self):
        if not self.task_name:
            raise ValueError('task_name is required')
        if self.count < 1:
            raise ValueError(f'count must be at least 1, got {self.count}')
        if self.poll_interval <= 0:
            raise ValueError(f'poll_interval must be positive, got {self.poll_interval}')
        if self.timeout < 0:
            raise ValueError(f'timeout must not be negative, got {self.timeout}')

        names = [pair['name'] for pair in self.environment or []]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate environment names: {', '.join(duplicates)}")

        if self.capacity_provider is not None:
            self.capacity_provider = CapacityProvider(self.capacity_provider)

    @property
    def max_attempts(self) -> int:
        return int(self.timeout // self.poll_interval)

    @property
    def override_target(self) -> str:
        return self.container_name or self.task_name


@dataclass
class ResolvedNetwork:
    # None means unspecified; the service applies the cluster/account default.
    security_group_ids: Optional[list] = None
    subnet_ids: Optional[list] = None


@dataclass
class LaunchResult:
    task_arn: str
    cluster: str
    task_name: str = ''
    response: dict = field(default_factory=dict, repr=False)


@dataclass
class RunOutcome:
    exit_code: int
    reason: str
    task_arn: Optional[str] = None
    waited: bool = True

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
