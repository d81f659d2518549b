from __future__ import annotations

import copy
import logging
from typing import Any

import yaml
from pydantic import ValidationError

from lambda_pipeline.models.buildspec import BuildSpecDocument
from lambda_pipeline.services.config import BuildConfig

logger = logging.getLogger(__name__)

ARTIFACT_BUCKET_VARIABLE = "ARTIFACT_BUCKET"

# https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-cli-command-reference-sam-package.html
_BASE_BUILDSPEC_YAML = """
version: 0.2

phases:
  install:
    runtime-versions:
      java: corretto11
    commands:
      - mvn install
  pre_build:
    commands:
      - echo Dependencies installed...
  build:
    commands:
      - mvn clean package

artifacts:
  files:
    - target/sam.jvm.yaml
"""


class BuildSpecError(RuntimeError):
    pass


class BuildSpecService:
    """Assembles the buildspec executed by the CodeBuild project.

    The base script is kept as YAML text, parsed into a mapping, adjusted for the
    configured variant and validated before CDK re-serializes it.
    """

    def __init__(self, config: BuildConfig) -> None:
        self._config = config

    @staticmethod
    def _parse_base() -> dict[str, Any]:
        try:
            parsed = yaml.safe_load(_BASE_BUILDSPEC_YAML)
        except yaml.YAMLError as exc:
            raise BuildSpecError("Failed to parse base buildspec template") from exc
        if not isinstance(parsed, dict):
            raise BuildSpecError("Base buildspec template must be a mapping")
        return copy.deepcopy(parsed)

    def sam_package_command(self) -> str:
        return (
            f"sam package --s3-bucket ${ARTIFACT_BUCKET_VARIABLE}"
            f" --template {self._config.sam_template_path}"
            f" --output-template-file {self._config.output_template_file}"
        )

    def build_spec_document(self, *, bucket_name: str) -> dict[str, Any]:
        """Return the buildspec mapping for the configured variant.

        `bucket_name` may be an unresolved CDK token; it is placed as a value in the
        mapping rather than spliced into YAML text.
        """

        spec = self._parse_base()
        phases = spec["phases"]

        phases["install"]["runtime-versions"]["java"] = self._config.java_runtime
        spec["artifacts"]["files"] = [self._config.sam_template_path]

        if self._config.package_with_sam:
            if not bucket_name:
                raise BuildSpecError("bucket_name must be provided when packaging with SAM")
            spec["env"] = {"variables": {ARTIFACT_BUCKET_VARIABLE: bucket_name}}
            phases["build"]["commands"].append(self.sam_package_command())
            spec["artifacts"]["files"].insert(0, self._config.output_template_file)

        try:
            document = BuildSpecDocument.model_validate(spec)
        except ValidationError as exc:
            raise BuildSpecError(f"Invalid buildspec: {exc}") from exc

        logger.debug(
            "Buildspec assembled (java=%s, sam_package=%s, artifacts=%s)",
            self._config.java_runtime,
            self._config.package_with_sam,
            spec["artifacts"]["files"],
        )
        return document.to_buildspec_object()

    def build_spec_yaml(self, *, bucket_name: str) -> str:
        """Render the buildspec as YAML text; the stack logs it at DEBUG level."""

        return yaml.safe_dump(self.build_spec_document(bucket_name=bucket_name), sort_keys=False)
