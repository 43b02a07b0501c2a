"""Default configuration parameters for the Predict client."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ApiParams:
    """Backend API access parameters."""
    base_url: str = "http://localhost:3000"         # Deployment origin
    timeout_seconds: float = 30.0                    # Per-request network timeout
    user_agent: str = "predict-app/0.1"
    health_path: str = "/health"                     # Liveness probe, shown as a link


@dataclass(frozen=True)
class SessionParams:
    """Session reconciliation parameters."""
    token_key: str = "token"                         # Storage key of the persisted token
    clear_token_on_transient_error: bool = True      # Network/5xx profile failure logs out


@dataclass(frozen=True)
class MarketParams:
    """Market listing parameters."""
    default_sort: str = "newest"
    page_limit: int = 6
    allowed_sorts: tuple[str, ...] = ("newest", "volume")


@dataclass(frozen=True)
class StorageParams:
    """Token storage parameters."""
    backend: str = "sqlite"                          # sqlite | memory
    path: str = "predict_client.db"


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True
    include_caller: bool = False


@dataclass(frozen=True)
class ClientConfig:
    """Complete client configuration."""
    api: ApiParams
    session: SessionParams
    markets: MarketParams
    storage: StorageParams
    logging: LoggingParams


def get_default_config() -> ClientConfig:
    """Get the default configuration instance."""
    return ClientConfig(
        api=ApiParams(),
        session=SessionParams(),
        markets=MarketParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )
