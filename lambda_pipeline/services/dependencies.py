from __future__ import annotations

from lambda_pipeline.services.config import PipelineConfig
from lambda_pipeline.services.setup.secrets_setup_service import SecretsSetupService


def get_pipeline_config() -> PipelineConfig:
    """Provider for the pipeline configuration loaded from the environment."""

    return PipelineConfig.from_env()


def get_secrets_setup_service() -> SecretsSetupService:
    """Provider for the GitHub token secret preflight check."""

    return SecretsSetupService.from_env()
