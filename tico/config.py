"""
Configuration management for tico.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/tico/config.json
- Fallback: ~/.tico/config.json
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEGENERATE_POLICIES = ("zero", "raw")
OUTPUT_FORMATS = ("table", "json")


@dataclass
class ScoringConfig:
    """Scoring engine settings.

    degenerate_range decides what a column flagged for normalization
    contributes when all candidates share the same raw distance:
    "zero" scores it 0, "raw" uses the raw distance unscaled.
    """
    degenerate_range: str = "zero"

    def __post_init__(self):
        if self.degenerate_range not in DEGENERATE_POLICIES:
            raise ValueError(
                f"degenerate_range must be one of {DEGENERATE_POLICIES}, "
                f"got {self.degenerate_range!r}"
            )


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    top_k: Optional[int] = None
    output_format: str = "table"


@dataclass
class TicoConfig:
    """Main tico configuration."""
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "scoring": asdict(self.scoring),
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TicoConfig':
        """Create from dictionary."""
        return cls(
            scoring=ScoringConfig(**data.get("scoring", {})),
            cli=CLIConfig(**data.get("cli", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. ~/.config/tico/config.json
    2. Fallback: ~/.tico/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "tico"
    else:
        config_dir = Path.home() / ".tico"

    return config_dir / "config.json"


def load_config(path: Optional[Path] = None) -> TicoConfig:
    """
    Load configuration from file.

    Args:
        path: Config file (default: get_config_path())

    Returns:
        TicoConfig instance with loaded values or defaults
    """
    config_path = Path(path) if path else get_config_path()

    if not config_path.exists():
        return TicoConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return TicoConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}. Using defaults")
        return TicoConfig()


def save_config(config: TicoConfig, path: Optional[Path] = None) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save
        path: Config file (default: get_config_path())

    Returns:
        Path the configuration was written to
    """
    config_path = Path(path) if path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path
