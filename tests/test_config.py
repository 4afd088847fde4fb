"""Tests for configuration loading and parameter construction."""

import os

import pytest
import yaml


class TestConfig:
    """Tests for PipelineConfig and YAML loading."""

    def test_defaults(self, default_config):
        from rasterdrone.config import FarthestPointParams, PreprocessingParams

        assert default_config.preprocessing.to_params() == PreprocessingParams()
        assert default_config.sampling.to_params() == FarthestPointParams(count=30)

    def test_missing_file_uses_defaults(self, temp_dir):
        from rasterdrone.config import PipelineConfig, load_config

        config = load_config(os.path.join(temp_dir, "nope.yaml"))

        assert config == PipelineConfig()

    def test_yaml_overrides(self, temp_dir):
        from rasterdrone.config import GridParams, load_config
        from rasterdrone.models import ImagePolarity

        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({
                "preprocessing": {
                    "polarity": "white_on_black",
                    "resize_width": None,
                    "percentile": 0.2,
                    "use_adaptive": True,
                    "unknown_key": 1,
                },
                "sampling": {"strategy": "grid", "cell_size": 12},
                "bogus_section": {"a": 1},
            }, f)

        config = load_config(path)
        params = config.preprocessing.to_params()

        assert params.polarity == ImagePolarity.WHITE_ON_BLACK
        assert params.resize is None
        assert params.percentile == 0.2
        assert params.use_adaptive
        assert params.adaptive_window == 50
        assert config.sampling.to_params() == GridParams(cell_size=12)

    def test_save_default_config_round_trip(self, temp_dir):
        from rasterdrone.config import PipelineConfig, load_config, save_default_config

        path = os.path.join(temp_dir, "default.yaml")
        save_default_config(path)

        assert load_config(path) == PipelineConfig()

    def test_unknown_strategy_rejected(self, default_config):
        default_config.sampling.strategy = "random"
        with pytest.raises(ValueError):
            default_config.sampling.to_params()

    def test_sampling_variants_differ(self):
        """Variants never compare equal even with the same number."""
        from rasterdrone.config import FarthestPointParams, GridParams
        from rasterdrone.models import SamplingStrategy

        assert FarthestPointParams(count=8) != GridParams(cell_size=8)
        assert GridParams(cell_size=8).strategy == SamplingStrategy.GRID

    def test_params_are_immutable(self):
        from dataclasses import FrozenInstanceError

        from rasterdrone.config import PreprocessingParams

        params = PreprocessingParams()
        with pytest.raises(FrozenInstanceError):
            params.percentile = 0.5
