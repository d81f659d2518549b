from __future__ import annotations

import logging
import os
from typing import Any, Optional, cast

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class SecretsSetupError(RuntimeError):
    pass


class GitHubTokenSecretMissingError(SecretsSetupError):
    pass


class SecretsSetupService:
    """Preflight check for the Secrets Manager secret holding the GitHub OAuth token.

    The pipeline template only references the secret by name, so a missing secret
    would otherwise surface as a failed CloudFormation deployment. Only the secret
    metadata is read (DescribeSecret); the token value is never fetched.
    """

    def __init__(self, *, region_name: Optional[str] = None, session: Optional[Any] = None) -> None:
        self._region_name = region_name
        self._session = session if session is not None else aioboto3.Session()

    @staticmethod
    def from_env() -> "SecretsSetupService":
        region_name = os.getenv("CDK_DEFAULT_REGION") or os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        return SecretsSetupService(region_name=region_name)

    async def verify_secret_exists(self, *, secret_name: str) -> str:
        """Return the ARN of `secret_name`.

        Raises:
            GitHubTokenSecretMissingError: if the secret does not exist or is scheduled for deletion.
            SecretsSetupError: for any other AWS failure.
        """

        if not secret_name or not secret_name.strip():
            raise ValueError("secret_name must be provided")

        client_cm = self._session.client("secretsmanager", region_name=self._region_name)
        try:
            async with cast(Any, client_cm) as client:
                resp = await client.describe_secret(SecretId=secret_name)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code == "ResourceNotFoundException":
                raise GitHubTokenSecretMissingError(
                    f"Secrets Manager secret not found: {secret_name}. "
                    "Create it with the GitHub OAuth token before deploying the pipeline."
                ) from exc
            raise SecretsSetupError(f"Failed describing secret {secret_name} ({code})") from exc
        except BotoCoreError as exc:
            raise SecretsSetupError(f"Failed describing secret {secret_name}") from exc

        if resp.get("DeletedDate"):
            raise GitHubTokenSecretMissingError(f"Secrets Manager secret is scheduled for deletion: {secret_name}")

        arn = str(resp.get("ARN") or "")
        logger.info("GitHub token secret present: %s", arn or secret_name)
        return arn
