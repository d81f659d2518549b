"""Configuration package (Facade).

Re-exports the public config types so callers import from a single, stable path
instead of the module that happens to define each one:

	from lambda_pipeline.services.config import PipelineConfig

Each config is a frozen dataclass with a ``from_env()`` constructor. Values are
read from environment variables with defaults matching the reference pipeline.
"""

from lambda_pipeline.services.config.build_config import BuildConfig
from lambda_pipeline.services.config.deploy_config import DeployConfig
from lambda_pipeline.services.config.pipeline_config import PipelineConfig
from lambda_pipeline.services.config.source_config import SourceConfig

__all__ = ["BuildConfig", "DeployConfig", "PipelineConfig", "SourceConfig"]
