"""Factory for building transports from configuration."""

from registry_client.adapters.http.rate_gated import RateGatedTransport
from registry_client.adapters.rate_limit.in_memory import MinimumIntervalGate
from registry_client.core.config import RegistrySettings, settings
from registry_client.core.errors import ConfigurationError


def create_transport(registry_settings: RegistrySettings | None = None) -> RateGatedTransport:
    """Instantiate a rate-gated transport from settings.

    Reads configuration from registry_client.core.config.settings unless
    explicit settings are given.

    Returns:
        RateGatedTransport: Transport with a fresh minimum-interval gate.

    Raises:
        ConfigurationError: If no user agent is configured.
    """
    cfg = registry_settings or settings.registry

    if not cfg.user_agent:
        raise ConfigurationError(
            code="missing_user_agent",
            message="Registry access requires REGISTRY_USER_AGENT to be set",
            details={"setting": "user_agent"},
        )

    return RateGatedTransport(
        user_agent=cfg.user_agent,
        gate=MinimumIntervalGate(min_interval=cfg.rate_limit_seconds),
        base_url=cfg.base_url,
        timeout_seconds=cfg.timeout_seconds,
    )
