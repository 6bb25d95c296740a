"""Resolution of the Better Stack API token from a referenced Secret."""
from kubernetes.client.rest import ApiException

from ..clients.exceptions import (
    CredentialsError,
    InvalidSecretReference,
    SecretKeyMissing,
    SecretNotFound,
    SecretValueEmpty,
    SecretValueInvalid,
)
from ..models import SecretKeySelector


async def resolve_api_token(cluster, namespace: str, selector: SecretKeySelector) -> str:
    """Return the token stored under ``selector.key`` in the named secret.

    Raises a CredentialsError subclass describing why the token is not
    available. Nothing is cached; every call reads the secret again.
    """
    if not selector.name:
        raise InvalidSecretReference("apiTokenSecretRef.name must be specified")

    try:
        data = await cluster.get_secret(namespace, selector.name)
    except ApiException as e:
        raise CredentialsError(f"unable to read secret {namespace}/{selector.name}: {e.reason}") from e
    if data is None:
        raise SecretNotFound(f"secret {namespace}/{selector.name} not found")

    if selector.key not in data:
        raise SecretKeyMissing(f"secret {namespace}/{selector.name} missing key {selector.key}")

    raw = data[selector.key]
    if not raw:
        raise SecretValueEmpty(f"secret {namespace}/{selector.name} key {selector.key} is empty")

    # Only the referenced key is decoded; other keys may hold binary data.
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SecretValueInvalid(
            f"secret {namespace}/{selector.name} key {selector.key} is not valid UTF-8"
        ) from e
