"""Configuration persistence manager for the accordion tiler.

This module handles loading and saving of tiler configuration to/from JSON files.
"""

import json
from pathlib import Path
from typing import Optional, Tuple

from .models import (
    CONFIG_FILE,
    EditorParameters,
    RemainderPolicy,
    ResampleMethod,
    TilerConfig,
)


def _enum_value(enum_cls, value, default):
    """Look up an enum member by value, falling back to default."""
    try:
        return enum_cls(value)
    except ValueError:
        return default


class ConfigManager:
    """Handles loading and saving of tiler configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.accordion_tiler_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> TilerConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            TilerConfig with loaded or default values
        """
        config = TilerConfig()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("top-level JSON value must be an object")
                # Update config with loaded values (fallback to defaults)
                params = data.get("parameters")
                if isinstance(params, dict):
                    # Clamping happens inside EditorParameters
                    config.parameters = EditorParameters(
                        scale=params.get("scale", config.parameters.scale),
                        num_splits=params.get(
                            "num_splits", config.parameters.num_splits
                        ),
                        horizontal_repeat=params.get(
                            "horizontal_repeat", config.parameters.horizontal_repeat
                        ),
                    )
                config.remainder_policy = _enum_value(
                    RemainderPolicy,
                    data.get("remainder_policy"),
                    config.remainder_policy,
                )
                config.resample = _enum_value(
                    ResampleMethod, data.get("resample"), config.resample
                )
                config.output_format = str(
                    data.get("output_format", config.output_format)
                ).upper()
                config.output_filename = str(
                    data.get("output_filename", config.output_filename)
                )
                max_workers = data.get("max_workers", config.max_workers)
                if max_workers is None or (
                    isinstance(max_workers, int) and max_workers >= 1
                ):
                    config.max_workers = max_workers
                threshold = data.get("parallel_threshold", config.parallel_threshold)
                if isinstance(threshold, int) and threshold >= 1:
                    config.parallel_threshold = threshold
                print(f"✓ Loaded configuration from {self.config_path}")
        except (OSError, ValueError) as e:
            print(f"Warning: Could not load config file: {e}")
            config = TilerConfig()

        return config

    def save(self, config: TilerConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: TilerConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        data = {
            "parameters": config.parameters.to_dict(),
            "remainder_policy": config.remainder_policy.value,
            "resample": config.resample.value,
            "output_format": config.output_format,
            "output_filename": config.output_filename,
            "max_workers": config.max_workers,
            "parallel_threshold": config.parallel_threshold,
        }
        try:
            with open(self.config_path, "w") as f:
                json.dump(data, f, indent=2)
            return True, None
        except OSError as e:
            return False, str(e)
