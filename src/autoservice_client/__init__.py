from .config import ClientConfig, ConfigError, load_config
from .errors import Cancelled, Decoding, ErrorKind, ServerRejected, Transport, classify, display_message
from .exceptions import (
    ApiError,
    ClientError,
    ConflictError,
    PermissionDeniedError,
    RequestCancelledError,
    ResponseDecodeError,
    TransportError,
)
from .filtering import FilterCriteria, FilterEngine, apply_filters
from .grouping import UNSCHEDULED, AppointmentBucket, build_buckets, group_by_day, sort_within_day, sorted_days
from .http_client import HttpClient
from .identity import Identity, IdentityStore
from .purchase import PurchaseAttempt, PurchaseCoordinator, PurchaseState
from .session import ApiSession
from .tasks import TaskHandle, TaskSupervisor

__all__ = [
    "ApiError",
    "ApiSession",
    "AppointmentBucket",
    "Cancelled",
    "ClientConfig",
    "ClientError",
    "ConfigError",
    "ConflictError",
    "Decoding",
    "ErrorKind",
    "FilterCriteria",
    "FilterEngine",
    "HttpClient",
    "Identity",
    "IdentityStore",
    "PermissionDeniedError",
    "PurchaseAttempt",
    "PurchaseCoordinator",
    "PurchaseState",
    "RequestCancelledError",
    "ResponseDecodeError",
    "ServerRejected",
    "TaskHandle",
    "TaskSupervisor",
    "Transport",
    "TransportError",
    "UNSCHEDULED",
    "apply_filters",
    "build_buckets",
    "classify",
    "display_message",
    "group_by_day",
    "load_config",
    "sort_within_day",
    "sorted_days",
]
