"""Analytics backends: parameter builders and default endpoints."""

from typing import Callable, Union

from editor_metrics import config
from editor_metrics.exceptions import UnknownProviderError
from editor_metrics.providers import google, matomo
from editor_metrics.types import Provider

_BUILDERS = {
    Provider.GOOGLE: google.build_params,
    Provider.MATOMO: matomo.build_params,
}


def parse_provider(provider: Union[str, Provider]) -> Provider:
    """Normalise a provider name."""
    if isinstance(provider, Provider):
        return provider
    try:
        return Provider(str(provider).strip().lower())
    except ValueError:
        valid = ", ".join(p.value for p in Provider)
        raise UnknownProviderError(
            f"Unknown analytics provider {provider!r} (expected one of: {valid})"
        ) from None


def get_builder(provider: Union[str, Provider]) -> Callable:
    return _BUILDERS[parse_provider(provider)]


def get_endpoint(provider: Union[str, Provider]) -> str:
    """Configured default endpoint (empty for Matomo unless set)."""
    if parse_provider(provider) is Provider.GOOGLE:
        return config.GOOGLE_ENDPOINT
    return config.MATOMO_ENDPOINT


__all__ = [
    "google",
    "matomo",
    "parse_provider",
    "get_builder",
    "get_endpoint",
]
