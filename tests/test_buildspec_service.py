from __future__ import annotations

import pytest
import yaml

from lambda_pipeline.models.buildspec import BuildSpecDocument
from lambda_pipeline.services.buildspec_service import ARTIFACT_BUCKET_VARIABLE, BuildSpecError, BuildSpecService
from lambda_pipeline.services.config import BuildConfig


def test_packaging_variant_uploads_and_emits_output_template() -> None:
    spec = BuildSpecService(BuildConfig()).build_spec_document(bucket_name="my-artifacts")

    assert spec["version"] == 0.2
    assert list(spec["phases"]) == ["install", "pre_build", "build"]
    assert spec["phases"]["install"]["runtime-versions"] == {"java": "corretto11"}
    assert spec["phases"]["install"]["commands"] == ["mvn install"]
    assert spec["env"] == {"variables": {ARTIFACT_BUCKET_VARIABLE: "my-artifacts"}}
    assert spec["phases"]["build"]["commands"] == [
        "mvn clean package",
        "sam package --s3-bucket $ARTIFACT_BUCKET --template target/sam.jvm.yaml "
        "--output-template-file outputtemplate.yml",
    ]
    assert spec["artifacts"]["files"] == ["outputtemplate.yml", "target/sam.jvm.yaml"]


def test_build_only_variant_skips_sam() -> None:
    spec = BuildSpecService(BuildConfig(package_with_sam=False)).build_spec_document(bucket_name="")

    assert "env" not in spec
    assert spec["phases"]["build"]["commands"] == ["mvn clean package"]
    assert spec["artifacts"]["files"] == ["target/sam.jvm.yaml"]


def test_custom_paths_and_runtime() -> None:
    config = BuildConfig(
        java_runtime="corretto17",
        sam_template_path="target/sam.native.yaml",
        output_template_file="packaged.yaml",
    )
    spec = BuildSpecService(config).build_spec_document(bucket_name="bucket")

    assert spec["phases"]["install"]["runtime-versions"]["java"] == "corretto17"
    assert spec["phases"]["build"]["commands"][-1].endswith(
        "--template target/sam.native.yaml --output-template-file packaged.yaml"
    )
    assert spec["artifacts"]["files"] == ["packaged.yaml", "target/sam.native.yaml"]


def test_assembly_does_not_leak_between_calls() -> None:
    svc = BuildSpecService(BuildConfig())
    first = svc.build_spec_document(bucket_name="a")
    second = svc.build_spec_document(bucket_name="b")

    assert len(second["phases"]["build"]["commands"]) == len(first["phases"]["build"]["commands"])
    assert second["env"]["variables"][ARTIFACT_BUCKET_VARIABLE] == "b"


def test_packaging_requires_bucket() -> None:
    with pytest.raises(BuildSpecError, match="bucket_name"):
        BuildSpecService(BuildConfig()).build_spec_document(bucket_name="")


def test_yaml_rendering_is_parseable() -> None:
    text = BuildSpecService(BuildConfig()).build_spec_yaml(bucket_name="bucket")
    parsed = yaml.safe_load(text)

    assert parsed["phases"]["pre_build"]["commands"] == ["echo Dependencies installed..."]
    assert text.index("install:") < text.index("build:")


def test_document_rejects_unknown_phase() -> None:
    with pytest.raises(ValueError, match="Unknown buildspec phases"):
        BuildSpecDocument.model_validate({"version": 0.2, "phases": {"deploy": {"commands": ["x"]}}})


def test_document_rejects_other_versions() -> None:
    with pytest.raises(ValueError, match="version"):
        BuildSpecDocument.model_validate({"version": 0.1, "phases": {"build": {"commands": []}}})


def test_invalid_document_surfaces_as_buildspec_error(monkeypatch) -> None:
    monkeypatch.setattr(
        "lambda_pipeline.services.buildspec_service._BASE_BUILDSPEC_YAML",
        "version: 0.2\nphases:\n  install:\n    runtime-versions: {}\n  compile:\n    commands: []\n"
        "  build:\n    commands: []\nartifacts:\n  files: [a]\n",
    )
    with pytest.raises(BuildSpecError, match="Invalid buildspec"):
        BuildSpecService(BuildConfig(package_with_sam=False)).build_spec_document(bucket_name="")
