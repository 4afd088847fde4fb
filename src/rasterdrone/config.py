"""
Configuration management for rasterdrone.

Stage parameters are frozen dataclasses so they can be compared by value to
decide whether a pipeline stage is stale. The YAML-backed PipelineConfig
builds them.
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Optional, Tuple, Union

import yaml

from rasterdrone.models import ImagePolarity, SamplingStrategy


@dataclass(frozen=True)
class PreprocessingParams:
    """Inputs of the preprocessing stage (threshold, resize, extract)."""
    polarity: ImagePolarity = ImagePolarity.BLACK_ON_WHITE
    resize: Optional[Tuple[int, int]] = (256, 256)
    percentile: float = 0.01
    use_adaptive: bool = False
    adaptive_window: int = 50
    adaptive_threshold: int = 15


@dataclass(frozen=True)
class FarthestPointParams:
    """Farthest-point sampling down to a target number of points."""
    count: int = 30
    strategy: SamplingStrategy = field(default=SamplingStrategy.FARTHEST, init=False)


@dataclass(frozen=True)
class GridParams:
    """
    Grid sampling keeping one point per square cell.

    Inputs of at most `count` points pass through unsampled, as with
    farthest-point sampling; larger inputs are reduced to one point per
    occupied cell, however many cells that is.
    """
    cell_size: int = 8
    count: int = 30
    strategy: SamplingStrategy = field(default=SamplingStrategy.GRID, init=False)


SamplingParams = Union[FarthestPointParams, GridParams]


@dataclass
class PreprocessingConfig:
    """Configuration for the preprocessing stage."""
    polarity: str = ImagePolarity.BLACK_ON_WHITE.value
    resize_width: Optional[int] = 256
    resize_height: Optional[int] = 256
    percentile: float = 0.01
    use_adaptive: bool = False
    adaptive_window: int = 50
    adaptive_threshold: int = 15

    def to_params(self):
        resize = None
        if self.resize_width and self.resize_height:
            resize = (int(self.resize_width), int(self.resize_height))
        return PreprocessingParams(
            polarity=ImagePolarity(self.polarity),
            resize=resize,
            percentile=float(self.percentile),
            use_adaptive=bool(self.use_adaptive),
            adaptive_window=int(self.adaptive_window),
            adaptive_threshold=int(self.adaptive_threshold),
        )


@dataclass
class SamplingConfig:
    """Configuration for the sampling stage."""
    strategy: str = SamplingStrategy.FARTHEST.value
    count: int = 30
    cell_size: int = 8

    def to_params(self):
        strategy = SamplingStrategy(self.strategy)
        if strategy == SamplingStrategy.GRID:
            return GridParams(cell_size=int(self.cell_size), count=int(self.count))
        return FarthestPointParams(count=int(self.count))


@dataclass
class ExportConfig:
    """Configuration for coordinate export."""
    physical_size: Optional[float] = None  # e.g. metres spanned by the longest axis
    preview: bool = False


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    preprocessing: PreprocessingConfig = field(default_factory=PreprocessingConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


_SECTIONS = ("preprocessing", "sampling", "export", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values. Unknown keys are ignored.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
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
    config = PipelineConfig()
    yaml_data = {section: asdict(getattr(config, section)) for section in _SECTIONS}

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
