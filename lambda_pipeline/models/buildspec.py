from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALLOWED_PHASES = ("install", "pre_build", "build", "post_build")


class BuildPhase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    runtime_versions: Optional[dict[str, str]] = Field(default=None, alias="runtime-versions")
    commands: list[str] = Field(default_factory=list)


class BuildEnv(BaseModel):
    model_config = ConfigDict(extra="forbid")

    variables: dict[str, str] = Field(default_factory=dict)


class BuildArtifacts(BaseModel):
    model_config = ConfigDict(extra="forbid")

    files: list[str] = Field(..., min_length=1, description="Paths collected into the build output artifact")


class BuildSpecDocument(BaseModel):
    """Subset of the CodeBuild buildspec (version 0.2) this pipeline emits."""

    model_config = ConfigDict(extra="forbid")

    version: Union[float, str]
    env: Optional[BuildEnv] = None
    phases: dict[str, BuildPhase]
    artifacts: Optional[BuildArtifacts] = None

    @field_validator("version")
    @classmethod
    def check_version(cls, value: Union[float, str]) -> Union[float, str]:
        if str(value) != "0.2":
            raise ValueError(f"Unsupported buildspec version: {value!r}")
        return value

    @field_validator("phases")
    @classmethod
    def check_phases(cls, value: dict[str, BuildPhase]) -> dict[str, BuildPhase]:
        unknown = sorted(set(value) - set(ALLOWED_PHASES))
        if unknown:
            raise ValueError(f"Unknown buildspec phases: {unknown}; expected a subset of {list(ALLOWED_PHASES)}")
        if not value:
            raise ValueError("At least one buildspec phase is required")
        return value

    def to_buildspec_object(self) -> dict[str, object]:
        """Dump to the plain mapping `BuildSpec.from_object_to_yaml` expects."""

        return self.model_dump(by_alias=True, exclude_none=True)
