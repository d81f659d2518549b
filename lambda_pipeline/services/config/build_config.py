from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from lambda_pipeline.services.config.env import env_bool, env_str


@dataclass(frozen=True)
class BuildConfig:
    """CodeBuild project settings and the knobs of the embedded buildspec.

    `build_image` is the attribute name of a `aws_codebuild.LinuxBuildImage` member,
    e.g. "STANDARD_5_0". `bucket_access` selects how the project reaches the artifacts
    bucket: the broad AmazonS3FullAccess managed policy, or a bucket-scoped grant.
    """

    BUCKET_ACCESS_MANAGED_POLICY: ClassVar[str] = "managed-policy"
    BUCKET_ACCESS_GRANT: ClassVar[str] = "grant"

    build_image: str = "STANDARD_5_0"
    privileged: bool = True
    java_runtime: str = "corretto11"
    package_with_sam: bool = True
    sam_template_path: str = "target/sam.jvm.yaml"
    output_template_file: str = "outputtemplate.yml"
    bucket_access: str = BUCKET_ACCESS_MANAGED_POLICY

    def __post_init__(self) -> None:
        allowed = (self.BUCKET_ACCESS_MANAGED_POLICY, self.BUCKET_ACCESS_GRANT)
        if self.bucket_access not in allowed:
            raise ValueError(f"Invalid ARTIFACT_BUCKET_ACCESS {self.bucket_access!r}; expected one of {allowed}")
        if not self.output_template_file.strip():
            raise ValueError("output_template_file must be provided")

    @staticmethod
    def from_env() -> "BuildConfig":
        defaults = BuildConfig()
        return BuildConfig(
            build_image=env_str("BUILD_IMAGE", defaults.build_image).upper(),
            privileged=env_bool("BUILD_PRIVILEGED", defaults.privileged),
            java_runtime=env_str("JAVA_RUNTIME", defaults.java_runtime),
            package_with_sam=env_bool("PACKAGE_WITH_SAM", defaults.package_with_sam),
            sam_template_path=env_str("SAM_TEMPLATE_PATH", defaults.sam_template_path),
            output_template_file=env_str("OUTPUT_TEMPLATE_FILE", defaults.output_template_file),
            bucket_access=env_str("ARTIFACT_BUCKET_ACCESS", defaults.bucket_access).lower(),
        )
