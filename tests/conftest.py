"""
Pytest configuration and shared fixtures.

- clean_env: strips every variable the pipeline config reads, so tests start from defaults
- pipeline_config: default configuration (full source -> build -> deploy variant)
- synth_template: synthesizes a PipelineStack and returns its assertions Template
"""

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from lambda_pipeline.services.config import PipelineConfig
from lambda_pipeline.stacks.pipeline_stack import PipelineStack

PIPELINE_ENV_VARS = (
    "PIPELINE_NAME",
    "PIPELINE_STACK_ID",
    "PIPELINE_CROSS_ACCOUNT_KEYS",
    "PIPELINE_PREFLIGHT_CHECK",
    "GITHUB_OWNER",
    "GITHUB_REPO",
    "GITHUB_BRANCH",
    "GITHUB_TOKEN_SECRET_NAME",
    "GITHUB_SOURCE_ACTION_NAME",
    "BUILD_IMAGE",
    "BUILD_PRIVILEGED",
    "JAVA_RUNTIME",
    "PACKAGE_WITH_SAM",
    "SAM_TEMPLATE_PATH",
    "OUTPUT_TEMPLATE_FILE",
    "ARTIFACT_BUCKET_ACCESS",
    "DEPLOY_ENABLED",
    "DEPLOY_STACK_NAME",
    "DEPLOY_CHANGE_SET_NAME",
    "CDK_DEFAULT_ACCOUNT",
    "CDK_DEFAULT_REGION",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in PIPELINE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def synth_template():
    def _synth(config: PipelineConfig) -> Template:
        app = cdk.App()
        stack = PipelineStack(app, "TestPipelineStack", config=config)
        return Template.from_stack(stack)

    return _synth
