# cli/call_api.py
"""
Smoke test for the deployed API: sends one request and prints the response.

The base URL comes from API_URL (.env is honoured) or, when that is unset,
from the `ApiUrl` output of the deployed CloudFormation stack.

    python -m cli.call_api --path /hello --method GET
"""
import argparse
import json
import os
import sys
from typing import Optional

import boto3
import requests
from botocore.exceptions import ClientError
from dotenv import load_dotenv

# Load environment variables from a .env file for local testing
load_dotenv()

DEFAULT_STACK_NAME = os.environ.get("STACK_NAME", "CdkOpenapiExampleStack")


def resolve_api_url(stack_name: str, region: Optional[str] = None) -> Optional[str]:
    """
    Returns API_URL if set, otherwise the stack's ApiUrl output (None if it has none).

    Raises:
        ClientError: If the stack cannot be described.
    """
    api_url = os.environ.get("API_URL")
    if api_url:
        return api_url

    print(f"API_URL not set, reading outputs of stack '{stack_name}'...")
    cloudformation = boto3.client("cloudformation", region_name=region)
    response = cloudformation.describe_stacks(StackName=stack_name)
    for output in response["Stacks"][0].get("Outputs", []):
        if output["OutputKey"] == "ApiUrl":
            return output["OutputValue"]
    return None


def call_api(base_url: str, path: str = "/hello", method: str = "GET", payload: Optional[dict] = None) -> requests.Response:
    """
    Sends a single request to the API and raises for non-2xx responses.
    """
    url = base_url.rstrip("/") + "/" + path.lstrip("/")
    print(f"--- {method.upper()} {url} ---")
    response = requests.request(method.upper(), url, json=payload, timeout=10)
    response.raise_for_status()
    return response


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Send a request to the deployed API.")
    parser.add_argument("--path", default="/hello")
    parser.add_argument("--method", default="GET")
    parser.add_argument("--data", default=None, help="JSON payload to send as the request body.")
    parser.add_argument("--stack-name", default=DEFAULT_STACK_NAME)
    parser.add_argument("--region", default=None)
    args = parser.parse_args(argv)

    try:
        payload = json.loads(args.data) if args.data else None
        base_url = resolve_api_url(args.stack_name, args.region)
        if not base_url:
            print(f"❌ ERROR: No API URL found. Set API_URL or deploy stack '{args.stack_name}'.")
            return 1
        response = call_api(base_url, args.path, args.method, payload)
    except json.JSONDecodeError as e:
        print(f"❌ --data is not valid JSON: {e}")
        return 1
    except ClientError as e:
        print(f"❌ Could not describe stack '{args.stack_name}': {e.response['Error']['Message']}")
        return 1
    except requests.exceptions.RequestException as e:
        print("❌ Request failed.")
        print(f"Error: {e}")
        return 1

    print("✅ Success!")
    print(f"Status Code: {response.status_code}")
    print(f"Response Body: {response.text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
