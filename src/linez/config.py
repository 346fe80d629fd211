"""
Configuration management for linez.

Loads YAML configuration with defaults for the sampler, the optimization
loop, the image source, the display and tracing.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml


@dataclass
class SamplerConfig:
    """Configuration for line candidate sampling."""
    thickness: int = 1
    max_thickness: int = 1  # > thickness draws thickness uniformly per candidate
    antialias: bool = False


@dataclass
class LoopConfig:
    """Configuration for the optimization loop."""
    iterations_per_frame: int = 4096
    seed: int = None
    report_interval: float = 2.0  # seconds between progress events


@dataclass
class ImageConfig:
    """Configuration for loading the target image."""
    max_edge: int = None


@dataclass
class DisplayConfig:
    """Configuration for the preview window."""
    window_title: str = "linez"
    scale: int = 1
    refresh_ms: int = 15
    headless: bool = False


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


_SECTIONS = ("sampler", "loop", "image", "display", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = AppConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass. Unknown keys are ignored."""
    for section in _SECTIONS:
        values = yaml_data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        for key, value in values.items():
            if hasattr(target, key):
                setattr(target, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(AppConfig())

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
