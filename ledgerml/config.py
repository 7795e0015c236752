"""
Configuration management for ledgerml.

Handles:
- Deploying account identity
- Ledger gateway connection settings
- Contract artifact location
- Fixed-point scale factor
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_DATA_DIR = Path.home() / ".ledgerml"

# Block gas limit used by most miners as of October 2019.
GAS_LIMIT = 8_900_000

# Floats are multiplied by this before being stored as integers on the ledger.
DEFAULT_TO_FLOAT = 1e9

DEFAULT_GATEWAY_PORT = 8545


@dataclass
class GatewayConfig:
    """Connection settings for the signing ledger gateway."""
    host: str = "localhost"
    port: int = DEFAULT_GATEWAY_PORT
    scheme: str = "http"
    timeout: float = 30.0  # Per HTTP request
    poll_interval: float = 1.0  # Between receipt polls
    receipt_timeout: float = 750.0  # Give up waiting for a receipt after this

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "scheme": self.scheme,
            "timeout": self.timeout,
            "poll_interval": self.poll_interval,
            "receipt_timeout": self.receipt_timeout,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GatewayConfig":
        # Filter to only known fields to handle config evolution
        known_fields = {"host", "port", "scheme", "timeout", "poll_interval", "receipt_timeout"}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered)


@dataclass
class Config:
    """
    Main ledgerml configuration.

    Stored at ~/.ledgerml/config.json
    """
    # Deploying account
    account: Optional[str] = None

    # Paths
    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    artifacts_dir: Optional[Path] = None

    # Components
    gateway: GatewayConfig = field(default_factory=GatewayConfig)

    # Encoding
    to_float: float = DEFAULT_TO_FLOAT

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.json"

    @property
    def deployments_path(self) -> Path:
        return self.data_dir / "deployments.json"

    @property
    def contracts_dir(self) -> Path:
        return self.artifacts_dir or self.data_dir / "contracts"

    def ensure_data_dir(self) -> None:
        """Create data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict:
        return {
            "account": self.account,
            "artifacts_dir": str(self.artifacts_dir) if self.artifacts_dir else None,
            "gateway": self.gateway.to_dict(),
            "to_float": self.to_float,
        }

    def save(self) -> None:
        """Save configuration to disk."""
        self.ensure_data_dir()

        with open(self.config_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.debug(f"Configuration saved to {self.config_path}")

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> "Config":
        """Load configuration from disk."""
        data_dir = data_dir or DEFAULT_DATA_DIR
        config_path = data_dir / "config.json"

        if not config_path.exists():
            return cls(data_dir=data_dir)

        with open(config_path, 'r') as f:
            data = json.load(f)

        artifacts_dir = data.get("artifacts_dir")
        config = cls(
            data_dir=data_dir,
            account=data.get("account"),
            artifacts_dir=Path(artifacts_dir) if artifacts_dir else None,
            to_float=data.get("to_float", DEFAULT_TO_FLOAT),
        )

        if "gateway" in data:
            config.gateway = GatewayConfig.from_dict(data["gateway"])

        return config

    @classmethod
    def exists(cls, data_dir: Optional[Path] = None) -> bool:
        """Check if configuration exists."""
        data_dir = data_dir or DEFAULT_DATA_DIR
        return (data_dir / "config.json").exists()


# Global config instance
_config: Optional[Config] = None


def get_config(data_dir: Optional[Path] = None) -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load(data_dir)
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
