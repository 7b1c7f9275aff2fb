"""
Configuration management for LDNN.

Network hyperparameters come from a flat key/value store: either a
``KEY=value`` file (parsed with python-dotenv) or environment variables
(optionally set in a ``.env`` file in the project root).

Usage:
    from ldnn.config import config, load_network_config

    # Defaults / environment
    network_config = config.network

    # Explicit file
    network_config = load_network_config("network.env")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values, load_dotenv

from .algorithms.clustering import DEFAULT_KMEANS_ITERATIONS

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

ENV_PREFIX = "LDNN_"


@dataclass
class NetworkConfig:
    """Hyperparameters of a single network."""
    polytope_count: int
    max_halfspaces: int
    alpha: float
    kmeans_iterations: int = DEFAULT_KMEANS_ITERATIONS

    def __post_init__(self):
        """Validate ranges."""
        if self.polytope_count < 1:
            raise ValueError(f"polytope_count must be >= 1, got {self.polytope_count}")
        if self.max_halfspaces < 1:
            raise ValueError(f"max_halfspaces must be >= 1, got {self.max_halfspaces}")
        if not self.alpha > 0:
            raise ValueError(f"alpha must be > 0, got {self.alpha}")
        if self.kmeans_iterations < 0:
            raise ValueError(
                f"kmeans_iterations must be >= 0, got {self.kmeans_iterations}"
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "NetworkConfig":
        """
        Build a config from a flat key/value mapping.

        Keys are matched case-insensitively; ``LDNN_`` and ``network.``
        prefixes are ignored, so ``POLYTOPE_COUNT``, ``LDNN_POLYTOPE_COUNT``
        and ``network.polytope_count`` are equivalent.

        Raises:
            ValueError: If a required key is missing or a value doesn't parse
        """
        normalized = {}
        for key, value in values.items():
            k = key.strip().lower()
            for prefix in (ENV_PREFIX.lower(), "network."):
                if k.startswith(prefix):
                    k = k[len(prefix):]
            normalized[k] = value

        missing = [
            k for k in ("polytope_count", "max_halfspaces", "alpha")
            if normalized.get(k) in (None, "")
        ]
        if missing:
            raise ValueError(f"Missing network configuration keys: {', '.join(missing)}")

        iterations = normalized.get("kmeans_iterations")
        return cls(
            polytope_count=int(normalized["polytope_count"]),
            max_halfspaces=int(normalized["max_halfspaces"]),
            alpha=float(normalized["alpha"]),
            kmeans_iterations=(
                int(iterations) if iterations not in (None, "") else DEFAULT_KMEANS_ITERATIONS
            ),
        )


@dataclass
class TrainingConfig:
    """Settings of the cross-validation driver."""
    rounds: int = 1
    gradient_iterations: int = 10
    train_fraction: float = 0.5
    threshold: float = 0.5

    def __post_init__(self):
        """Validate ranges."""
        if self.rounds < 1:
            raise ValueError(f"rounds must be >= 1, got {self.rounds}")
        if self.gradient_iterations < 0:
            raise ValueError(
                f"gradient_iterations must be >= 0, got {self.gradient_iterations}"
            )
        if not 0.0 < self.train_fraction < 1.0:
            raise ValueError(
                f"train_fraction must be in (0, 1), got {self.train_fraction}"
            )


def load_network_config(path: Union[str, Path]) -> NetworkConfig:
    """
    Read a NetworkConfig from a ``KEY=value`` file.

    Args:
        path: File with lines such as ``polytope_count=4``

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If keys are missing or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Network config file not found: {path}")
    return NetworkConfig.from_mapping(dotenv_values(path))


class Config:
    """
    Application configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment
    """

    def __init__(self):
        """Load configuration from environment."""
        self.log_level = os.getenv("LDNN_LOG_LEVEL", "INFO").upper()

        # Network configuration (lazy-loaded)
        self._network: Optional[NetworkConfig] = None

    def get_network_config(self) -> NetworkConfig:
        """
        Build the network configuration from ``LDNN_*`` variables.

        Raises:
            ValueError: If a variable doesn't parse or is out of range
        """
        if self._network is None:
            self._network = NetworkConfig(
                polytope_count=int(os.getenv("LDNN_POLYTOPE_COUNT", "4")),
                max_halfspaces=int(os.getenv("LDNN_MAX_HALFSPACES", "4")),
                alpha=float(os.getenv("LDNN_ALPHA", "5.0")),
                kmeans_iterations=int(
                    os.getenv("LDNN_KMEANS_ITERATIONS", str(DEFAULT_KMEANS_ITERATIONS))
                ),
            )
        return self._network

    @property
    def network(self) -> NetworkConfig:
        return self.get_network_config()


# Global config instance
config = Config()
