"""Client modules for external services."""
from .betterstack import BetterStackClient, parse_api_error
from .cluster import KubernetesClusterState, load_kube_configuration
from .exceptions import (
    BetterStackAPIError,
    CredentialsError,
    InvalidSecretReference,
    MissingRemoteID,
    SecretKeyMissing,
    SecretNotFound,
    SecretValueEmpty,
    SecretValueInvalid,
    is_not_found,
    is_quota_exceeded,
)

__all__ = [
    "BetterStackClient",
    "parse_api_error",
    "KubernetesClusterState",
    "load_kube_configuration",
    "BetterStackAPIError",
    "CredentialsError",
    "InvalidSecretReference",
    "SecretKeyMissing",
    "SecretNotFound",
    "SecretValueEmpty",
    "SecretValueInvalid",
    "MissingRemoteID",
    "is_not_found",
    "is_quota_exceeded",
]
