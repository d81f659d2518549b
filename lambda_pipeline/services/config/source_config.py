from __future__ import annotations

from dataclasses import dataclass

from lambda_pipeline.services.config.env import env_str


@dataclass(frozen=True)
class SourceConfig:
    """GitHub repository the pipeline pulls from.

    The OAuth token is never read here; only the name of the Secrets Manager
    secret holding it is configured, and CloudFormation resolves it at deploy time.
    """

    owner: str = "MarcosMarchado"
    repo: str = "lambda-quarkus"
    branch: str = "main"
    oauth_token_secret_name: str = "github-token"
    action_name: str = "Source"

    @staticmethod
    def from_env() -> "SourceConfig":
        defaults = SourceConfig()
        return SourceConfig(
            owner=env_str("GITHUB_OWNER", defaults.owner),
            repo=env_str("GITHUB_REPO", defaults.repo),
            branch=env_str("GITHUB_BRANCH", defaults.branch),
            oauth_token_secret_name=env_str("GITHUB_TOKEN_SECRET_NAME", defaults.oauth_token_secret_name),
            action_name=env_str("GITHUB_SOURCE_ACTION_NAME", defaults.action_name),
        )
