from photonctl.client import AsyncPhotonClient, connect
from photonctl.config.models import CLIConfig, PollingConfig, RetryConfig
from photonctl.errors import (
    APIError,
    ConfigError,
    FetchRetriesExhaustedError,
    InvalidArgumentError,
    NotFoundError,
    PhotonError,
    RequestError,
    TaskFailedError,
    WaitError,
    WaitTimeoutError,
)
from photonctl.polling import WaitPolicy, await_ready, await_task, wait_for_task

__version__ = "0.4.0"

__all__ = [
    "__version__",
    "APIError",
    "AsyncPhotonClient",
    "CLIConfig",
    "ConfigError",
    "FetchRetriesExhaustedError",
    "InvalidArgumentError",
    "NotFoundError",
    "PhotonError",
    "PollingConfig",
    "RequestError",
    "RetryConfig",
    "TaskFailedError",
    "WaitError",
    "WaitPolicy",
    "WaitTimeoutError",
    "await_ready",
    "await_task",
    "connect",
    "wait_for_task",
]
