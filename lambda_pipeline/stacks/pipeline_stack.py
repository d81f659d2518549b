from __future__ import annotations

import logging
from typing import Any

from aws_cdk import (
    CfnCapabilities,
    CfnOutput,
    RemovalPolicy,
    SecretValue,
    Stack,
    aws_codebuild as codebuild,
    aws_codepipeline as codepipeline,
    aws_codepipeline_actions as cpactions,
    aws_iam as iam,
    aws_s3 as s3,
)
from constructs import Construct

from lambda_pipeline.services import policy_service
from lambda_pipeline.services.buildspec_service import BuildSpecService
from lambda_pipeline.services.config import BuildConfig, PipelineConfig

logger = logging.getLogger(__name__)


class PipelineStack(Stack):
    """CodePipeline for the Lambda/Quarkus application: source -> build -> deploy.

    Stages are registered in order. The deploy stage is optional and, when present,
    stages a CloudFormation change set from the packaged SAM template and executes it.
    """

    def __init__(self, scope: Construct, construct_id: str, *, config: PipelineConfig, **kwargs: Any) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self._config = config

        self.artifacts_bucket = s3.Bucket(
            self,
            "S3BucketForPipelineArtifacts",
            removal_policy=RemovalPolicy.DESTROY,
        )

        self.pipeline = codepipeline.Pipeline(
            self,
            "Pipeline",
            pipeline_name=config.pipeline_name,
            cross_account_keys=config.cross_account_keys,
        )

        self.source_output = codepipeline.Artifact("SourceOutput")
        self.build_artifact = codepipeline.Artifact("BuildArtifact")

        self._add_source_stage()
        self.project = self._create_build_project()
        self._add_build_stage()
        if config.deploy.enabled:
            self._add_deploy_stage()

        CfnOutput(self, "PipelineName", value=self.pipeline.pipeline_name)
        CfnOutput(self, "ArtifactsBucketName", value=self.artifacts_bucket.bucket_name)

        logger.info(
            "Pipeline %s defined with stages %s (source=%s/%s@%s)",
            config.pipeline_name,
            ", ".join(config.stage_names),
            config.source.owner,
            config.source.repo,
            config.source.branch,
        )

    def _add_source_stage(self) -> None:
        source = self._config.source
        self.pipeline.add_stage(
            stage_name="Source",
            actions=[
                cpactions.GitHubSourceAction(
                    action_name=source.action_name,
                    owner=source.owner,
                    repo=source.repo,
                    branch=source.branch,
                    oauth_token=SecretValue.secrets_manager(source.oauth_token_secret_name),
                    output=self.source_output,
                )
            ],
        )

    @staticmethod
    def _linux_build_image(name: str) -> codebuild.IBuildImage:
        image = getattr(codebuild.LinuxBuildImage, name, None)
        if image is None:
            raise ValueError(f"Unknown CodeBuild Linux image: {name!r} (BUILD_IMAGE)")
        return image

    def _create_build_project(self) -> codebuild.PipelineProject:
        build = self._config.build
        buildspec_service = BuildSpecService(build)
        buildspec = buildspec_service.build_spec_document(bucket_name=self.artifacts_bucket.bucket_name)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "CodeBuild buildspec:\n%s",
                buildspec_service.build_spec_yaml(bucket_name=self.artifacts_bucket.bucket_name),
            )

        project = codebuild.PipelineProject(
            self,
            "CodeBuildProject",
            environment=codebuild.BuildEnvironment(
                build_image=self._linux_build_image(build.build_image),
                privileged=build.privileged,
            ),
            build_spec=codebuild.BuildSpec.from_object_to_yaml(buildspec),
        )

        if build.bucket_access == BuildConfig.BUCKET_ACCESS_GRANT:
            self.artifacts_bucket.grant_read_write(project)
        elif project.role is not None:
            for policy in policy_service.managed_policies(policy_service.codebuild_managed_policy_names()):
                project.role.add_managed_policy(policy)

        return project

    def _add_build_stage(self) -> None:
        self.pipeline.add_stage(
            stage_name="Build",
            actions=[
                cpactions.CodeBuildAction(
                    action_name="BuildAction",
                    input=self.source_output,
                    outputs=[self.build_artifact],
                    project=self.project,
                )
            ],
        )

    def _add_deploy_stage(self) -> None:
        deploy = self._config.deploy

        prepare_changes = cpactions.CloudFormationCreateReplaceChangeSetAction(
            action_name="PrepareChanges",
            stack_name=deploy.stack_name,
            change_set_name=deploy.change_set_name,
            template_path=self.build_artifact.at_path(self._config.build.output_template_file),
            cfn_capabilities=[CfnCapabilities.NAMED_IAM, CfnCapabilities.AUTO_EXPAND],
            admin_permissions=False,
            run_order=1,
        )
        execute_changes = cpactions.CloudFormationExecuteChangeSetAction(
            action_name="ExecuteChanges",
            stack_name=deploy.stack_name,
            change_set_name=deploy.change_set_name,
            run_order=2,
        )

        self.pipeline.add_stage(stage_name="Deploy", actions=[prepare_changes, execute_changes])

        # deployment_role only exists once the action is bound to a stage
        deployment_role = prepare_changes.deployment_role
        for policy in policy_service.managed_policies(policy_service.deployment_managed_policy_names()):
            deployment_role.add_managed_policy(policy)
        deployment_role.attach_inline_policy(
            iam.Policy(
                self,
                policy_service.CLOUDFORMATION_INLINE_POLICY_ID,
                statements=[policy_service.cloudformation_deployment_statement()],
            )
        )
