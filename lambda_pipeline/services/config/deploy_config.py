from __future__ import annotations

from dataclasses import dataclass

from lambda_pipeline.services.config.env import env_bool, env_str


@dataclass(frozen=True)
class DeployConfig:
    enabled: bool = True
    stack_name: str = "Codepipeline-Lambda-Stack"
    change_set_name: str = "StagedChangeSet"

    @staticmethod
    def from_env() -> "DeployConfig":
        defaults = DeployConfig()
        return DeployConfig(
            enabled=env_bool("DEPLOY_ENABLED", defaults.enabled),
            stack_name=env_str("DEPLOY_STACK_NAME", defaults.stack_name),
            change_set_name=env_str("DEPLOY_CHANGE_SET_NAME", defaults.change_set_name),
        )
