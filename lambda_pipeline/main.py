from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import aws_cdk as cdk

from lambda_pipeline.services.config import PipelineConfig
from lambda_pipeline.services.config.env import env_bool
from lambda_pipeline.services.dependencies import get_pipeline_config, get_secrets_setup_service
from lambda_pipeline.stacks.pipeline_stack import PipelineStack

logger = logging.getLogger(__name__)


def _ensure_logging() -> None:
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid LOG_LEVEL {level!r}; expected one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    formatter = logging.Formatter("%(levelname)s: %(message)s")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    else:
        root.setLevel(level)
        for handler in root.handlers:
            handler.setFormatter(formatter)


def _run_preflight(config: PipelineConfig) -> None:
    secret_name = config.source.oauth_token_secret_name
    logger.info("Preflight: checking Secrets Manager secret %r", secret_name)
    asyncio.run(get_secrets_setup_service().verify_secret_exists(secret_name=secret_name))


def build_app(config: PipelineConfig, app: Optional[cdk.App] = None) -> cdk.App:
    """Create the CDK app holding the pipeline stack, without synthesizing it."""

    app = app or cdk.App()

    env = None
    if config.account or config.region:
        env = cdk.Environment(account=config.account, region=config.region)

    PipelineStack(app, config.stack_id, config=config, env=env)
    return app


def main() -> None:
    _ensure_logging()
    try:
        config = get_pipeline_config()
        if env_bool("PIPELINE_PREFLIGHT_CHECK", False):
            _run_preflight(config)
        app = build_app(config)
    except Exception:
        logger.exception("Pipeline definition failed")
        raise

    app.synth()
