# infra_cdk/config.py
"""
Deployment settings for the OpenAPI stack, read from environment variables
or a local .env file.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Relative paths in the settings are resolved against the project root,
# so synth works no matter where `cdk` is invoked from.
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class StackSettings(BaseSettings):
    """
    Manages env vars using Pydantic BaseSettings.
    Every field has a default so a plain `cdk synth` needs no configuration.
    """
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        populate_by_name=True,
    )

    stack_name: str = Field("CdkOpenapiExampleStack", alias='STACK_NAME')
    openapi_path: str = Field("api/docs/openapi.yaml", alias='OPENAPI_PATH')
    lambda_code_dir: str = Field("lambdas/hello", alias='LAMBDA_CODE_DIR')
    lambda_handler: str = Field("app.handler", alias='LAMBDA_HANDLER')
    rest_api_name: str = Field("OpenApiGateway", alias='REST_API_NAME')
    # cdk-nag reports AwsSolutions findings as synth errors, so it is opt-in
    enable_cdk_nag: bool = Field(False, alias='ENABLE_CDK_NAG')

    @property
    def openapi_file(self) -> Path:
        return _resolve(self.openapi_path)

    @property
    def lambda_code_path(self) -> Path:
        return _resolve(self.lambda_code_dir)


def _resolve(path: str) -> Path:
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return PROJECT_ROOT / candidate


@lru_cache()
def get_settings() -> StackSettings:
    """Returns the shared settings instance."""
    return StackSettings()
