"""Config-driven training pipelines."""

from .pipelines import load_preset, merge_config, presets, read_config_file, run_pipeline

__all__ = ["load_preset", "merge_config", "presets", "read_config_file", "run_pipeline"]
