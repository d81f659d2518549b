from __future__ import annotations

from aws_cdk import aws_iam as iam

CLOUDFORMATION_INLINE_POLICY_ID = "CodePipelineCloudFormationInlinePolicy"

_CODEBUILD_MANAGED_POLICIES = ("AmazonS3FullAccess",)
_DEPLOYMENT_MANAGED_POLICIES = ("AWSLambdaExecute",)

# Lets CloudFormation create the SAM application (API Gateway, CodeDeploy, Lambda
# and its roles) and read the packaged template from the artifacts bucket.
_CLOUDFORMATION_DEPLOYMENT_ACTIONS = (
    "apigateway:*",
    "codedeploy:*",
    "lambda:*",
    "cloudformation:CreateChangeSet",
    "iam:GetRole",
    "iam:CreateRole",
    "iam:DeleteRole",
    "iam:PutRolePolicy",
    "iam:AttachRolePolicy",
    "iam:DeleteRolePolicy",
    "iam:DetachRolePolicy",
    "iam:PassRole",
    "s3:GetObject",
    "s3:GetObjectVersion",
    "s3:GetBucketVersioning",
)


def codebuild_managed_policy_names() -> list[str]:
    return list(_CODEBUILD_MANAGED_POLICIES)


def deployment_managed_policy_names() -> list[str]:
    return list(_DEPLOYMENT_MANAGED_POLICIES)


def cloudformation_deployment_actions() -> list[str]:
    return list(_CLOUDFORMATION_DEPLOYMENT_ACTIONS)


def managed_policies(names: list[str]) -> list[iam.IManagedPolicy]:
    return [iam.ManagedPolicy.from_aws_managed_policy_name(name) for name in names]


def cloudformation_deployment_statement() -> iam.PolicyStatement:
    """Inline statement attached to the change-set deployment role."""

    return iam.PolicyStatement(
        effect=iam.Effect.ALLOW,
        actions=cloudformation_deployment_actions(),
        resources=["*"],
    )
