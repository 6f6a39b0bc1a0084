# infra_cdk/openapi_stack.py
from typing import Optional

from aws_cdk import (
    Aspects,
    Aws,
    CfnOutput,
    Stack,
    aws_apigateway as apigw,
    aws_iam as iam,
    aws_lambda as _lambda,
)
from cdk_nag import AwsSolutionsChecks
from constructs import Construct

from infra_cdk.config import StackSettings, get_settings
from infra_cdk.openapi_enricher import (
    ApiDescription,
    IntegrationTarget,
    enrich_api_description,
    load_api_description,
)


def declare_compute_unit(scope: Construct, settings: StackSettings) -> _lambda.Function:
    """Declares the Lambda function that serves every API route."""
    return _lambda.Function(scope, "MyLambda",
        runtime=_lambda.Runtime.PYTHON_3_12,
        handler=settings.lambda_handler,
        code=_lambda.Code.from_asset(str(settings.lambda_code_path)),
    )


def declare_gateway(scope: Construct, description: ApiDescription, rest_api_name: str) -> apigw.SpecRestApi:
    """Declares a REST API whose routes come from the enriched OpenAPI document, embedded inline."""
    return apigw.SpecRestApi(scope, "MySpecApi",
        api_definition=apigw.ApiDefinition.from_inline(description.to_dict()),
        rest_api_name=rest_api_name,
    )


def declare_access_grant(function: _lambda.Function, api: apigw.SpecRestApi) -> None:
    """Allows this API (and only this API) to invoke the function."""
    function.add_permission("ApiInvokePermission",
        principal=iam.ServicePrincipal("apigateway.amazonaws.com"),
        action="lambda:InvokeFunction",
        source_arn=api.arn_for_execute_api(),
    )


class OpenApiStack(Stack):
    '''
    CDK stack for the OpenAPI-driven gateway.
    Creates a Lambda function, loads the OpenAPI document and points every operation in it
    at the function, creates a SpecRestApi from that document and grants the API permission
    to invoke the function.
    '''

    def __init__(self, scope: Construct, construct_id: str, settings: Optional[StackSettings] = None, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)
        settings = settings or get_settings()

        # === STAGE 1: Compute ===
        self.function = declare_compute_unit(self, settings)

        # === STAGE 2: Enrich the OpenAPI document ===
        description = load_api_description(settings.openapi_file)
        target = IntegrationTarget(
            function_arn=self.function.function_arn,
            partition=Aws.PARTITION,
            region=Aws.REGION,
        )
        self.api_description = enrich_api_description(description, target)

        # === STAGE 3: Gateway ===
        self.api = declare_gateway(self, self.api_description, settings.rest_api_name)

        # === STAGE 4: Access grant ===
        declare_access_grant(self.function, self.api)

        # === Outputs ===
        CfnOutput(self, "ApiUrl", value=self.api.url, description="The base URL of the deployed API.")
        CfnOutput(self, "RestApiId", value=self.api.rest_api_id)
        CfnOutput(self, "FunctionArn", value=self.function.function_arn)

        if settings.enable_cdk_nag:
            Aspects.of(self).add(AwsSolutionsChecks())
