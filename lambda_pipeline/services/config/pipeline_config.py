from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from lambda_pipeline.services.config.build_config import BuildConfig
from lambda_pipeline.services.config.deploy_config import DeployConfig
from lambda_pipeline.services.config.env import env_bool, env_str
from lambda_pipeline.services.config.source_config import SourceConfig


@dataclass(frozen=True)
class PipelineConfig:
    """Top-level configuration for the pipeline stack.

    Combines the per-stage configs and checks the constraints that span them:
    the deploy stage consumes the template produced by `sam package`, so it cannot
    be enabled while SAM packaging is switched off.
    """

    pipeline_name: str = "Pipeline"
    stack_id: str = "PipelineStack"
    cross_account_keys: bool = False
    account: Optional[str] = None
    region: Optional[str] = None
    source: SourceConfig = field(default_factory=SourceConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)

    def __post_init__(self) -> None:
        if self.deploy.enabled and not self.build.package_with_sam:
            raise ValueError(
                "DEPLOY_ENABLED requires PACKAGE_WITH_SAM; the deploy stage needs the packaged output template"
            )

    @property
    def stage_names(self) -> list[str]:
        names = ["Source", "Build"]
        if self.deploy.enabled:
            names.append("Deploy")
        return names

    @staticmethod
    def from_env() -> "PipelineConfig":
        defaults = PipelineConfig()

        account = os.getenv("CDK_DEFAULT_ACCOUNT") or None
        region = os.getenv("CDK_DEFAULT_REGION") or os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")

        return PipelineConfig(
            pipeline_name=env_str("PIPELINE_NAME", defaults.pipeline_name),
            stack_id=env_str("PIPELINE_STACK_ID", defaults.stack_id),
            cross_account_keys=env_bool("PIPELINE_CROSS_ACCOUNT_KEYS", defaults.cross_account_keys),
            account=account,
            region=region or None,
            source=SourceConfig.from_env(),
            build=BuildConfig.from_env(),
            deploy=DeployConfig.from_env(),
        )
