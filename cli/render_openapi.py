# cli/render_openapi.py
"""
Prints the OpenAPI document exactly as it will be embedded in the REST API,
for a given Lambda function ARN. Nothing is deployed.

    python -m cli.render_openapi --function-arn arn:aws:lambda:us-east-1:123456789012:function:hello
"""
import argparse
import contextlib
import sys

import yaml

from infra_cdk.config import get_settings
from infra_cdk.openapi_enricher import (
    IntegrationTarget,
    enrich_api_description,
    load_api_description,
)


def render_enriched_openapi(openapi_path: str, function_arn: str, partition: str, region: str) -> str:
    """
    Loads and enriches the document, returning it as YAML text.
    """
    description = load_api_description(openapi_path)
    target = IntegrationTarget(function_arn=function_arn, partition=partition, region=region)
    enriched = enrich_api_description(description, target)
    return yaml.safe_dump(enriched.to_dict(), sort_keys=False)


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Render the enriched OpenAPI document.")
    parser.add_argument("--function-arn", required=True, help="ARN (or name) of the target Lambda function.")
    parser.add_argument("--openapi", default=str(settings.openapi_file), help="Path to the OpenAPI YAML file.")
    parser.add_argument("--partition", default="aws")
    parser.add_argument("--region", default="us-east-1")
    args = parser.parse_args(argv)

    try:
        # stdout carries only the YAML document, progress lines go to stderr
        with contextlib.redirect_stdout(sys.stderr):
            rendered = render_enriched_openapi(args.openapi, args.function_arn, args.partition, args.region)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Could not render {args.openapi}: {e}", file=sys.stderr)
        return 1

    print(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
