# infra_cdk/openapi_enricher.py
"""
Loads an OpenAPI document and attaches an API Gateway Lambda proxy
integration (`x-amazon-apigateway-integration`) to every operation in it.

The enriched document is embedded inline in the SpecRestApi, so the gateway
routes every (path, method) pair to the same Lambda function.
"""
import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml

INTEGRATION_KEY = "x-amazon-apigateway-integration"

# Keys of an OpenAPI path item that hold operation objects.
HTTP_METHODS = frozenset(
    ["get", "put", "post", "delete", "options", "head", "patch", "trace"]
)
ANY_METHOD = "x-amazon-apigateway-any-method"

# Lambda proxy integrations are always invoked with POST, whatever the route's method.
LAMBDA_INVOKE_METHOD = "POST"
PASSTHROUGH_BEHAVIOR = "when_no_match"
INTEGRATION_TYPE = "aws_proxy"


class InvalidApiDescriptionError(ValueError):
    """Raised when the OpenAPI document does not have the path/method nesting we expect."""
    pass


def build_integration_uri(function_arn: str, partition: str, region: str) -> str:
    """
    Builds the API Gateway service URI used to invoke a Lambda function.
    """
    return (
        f"arn:{partition}:apigateway:{region}:lambda:path/2015-03-31"
        f"/functions/{function_arn}/invocations"
    )


@dataclass(frozen=True)
class IntegrationTarget:
    """
    The deployed compute unit the gateway should invoke.
    `function_arn` is usually an unresolved CDK token at synth time.
    """
    function_arn: str
    partition: str
    region: str

    @property
    def uri(self) -> str:
        return build_integration_uri(self.function_arn, self.partition, self.region)


@dataclass(frozen=True)
class IntegrationExtension:
    uri: str
    passthrough_behavior: str = PASSTHROUGH_BEHAVIOR
    http_method: str = LAMBDA_INVOKE_METHOD
    type: str = INTEGRATION_TYPE

    @classmethod
    def for_target(cls, target: IntegrationTarget) -> "IntegrationExtension":
        return cls(uri=target.uri)

    def to_dict(self) -> Dict[str, str]:
        return {
            "uri": self.uri,
            "passthroughBehavior": self.passthrough_behavior,
            "httpMethod": self.http_method,
            "type": self.type,
        }


@dataclass
class Operation:
    """
    A single operation object. `fields` holds everything except the integration.
    """
    method: str
    fields: Dict[str, Any] = field(default_factory=dict)
    # Raw integration found in the source document, if any
    existing_integration: Optional[Any] = None
    integration: Optional[IntegrationExtension] = None

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.fields)
        if self.integration is not None:
            result[INTEGRATION_KEY] = self.integration.to_dict()
        elif self.existing_integration is not None:
            result[INTEGRATION_KEY] = copy.deepcopy(self.existing_integration)
        return result


@dataclass
class PathItem:
    path: str
    operations: List[Operation] = field(default_factory=list)
    # Path-level keys that are not operations (parameters, summary, servers, ...)
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.extras)
        for operation in self.operations:
            result[operation.method] = operation.to_dict()
        return result


@dataclass
class ApiDescription:
    """
    Typed view of an OpenAPI document.
    `document` keeps every top-level field other than `paths`.
    """
    document: Dict[str, Any] = field(default_factory=dict)
    paths: List[PathItem] = field(default_factory=list)
    has_paths_key: bool = False
    # Original `paths` value (None or {}) when the document has no path items
    empty_paths: Any = None

    def operations(self) -> Iterator[Tuple[str, Operation]]:
        for path_item in self.paths:
            for operation in path_item.operations:
                yield path_item.path, operation

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.document)
        if self.paths:
            result["paths"] = {item.path: item.to_dict() for item in self.paths}
        elif self.has_paths_key:
            result["paths"] = copy.deepcopy(self.empty_paths)
        return result


def _is_method(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    return key.lower() in HTTP_METHODS or key == ANY_METHOD


def _parse_operation(path: str, method: str, raw: Any) -> Operation:
    if not isinstance(raw, dict):
        raise InvalidApiDescriptionError(
            f"Operation '{method.upper()} {path}' must be a mapping, got {type(raw).__name__}."
        )
    fields = {k: v for k, v in raw.items() if k != INTEGRATION_KEY}
    return Operation(method=method, fields=fields, existing_integration=raw.get(INTEGRATION_KEY))


def _parse_path_item(path: str, raw: Any) -> PathItem:
    # An empty path item simply has no operations.
    if raw is None:
        return PathItem(path=path)
    if not isinstance(raw, dict):
        raise InvalidApiDescriptionError(
            f"Path item '{path}' must be a mapping of methods, got {type(raw).__name__}."
        )

    path_item = PathItem(path=path)
    for key, value in raw.items():
        if _is_method(key):
            path_item.operations.append(_parse_operation(path, key, value))
        else:
            path_item.extras[key] = value
    return path_item


def parse_api_description(document: Any) -> ApiDescription:
    """
    Validates the shape of a loaded OpenAPI document and converts it into an ApiDescription.

    Args:
        document: The parsed YAML/JSON document.

    Returns:
        The typed description. The input is not modified.

    Raises:
        InvalidApiDescriptionError: If the document, `paths`, a path item or an
            operation has the wrong type.
    """
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise InvalidApiDescriptionError(
            f"OpenAPI document must be a mapping, got {type(document).__name__}."
        )

    raw_paths = document.get("paths")
    if raw_paths is not None and not isinstance(raw_paths, dict):
        raise InvalidApiDescriptionError(
            f"'paths' must be a mapping of route paths, got {type(raw_paths).__name__}."
        )

    description = ApiDescription(
        document={k: copy.deepcopy(v) for k, v in document.items() if k != "paths"},
        has_paths_key="paths" in document,
        empty_paths=None if raw_paths is None else {},
    )
    for path, raw_item in (raw_paths or {}).items():
        description.paths.append(_parse_path_item(str(path), copy.deepcopy(raw_item)))
    return description


def load_api_description(openapi_path: Union[str, Path]) -> ApiDescription:
    """
    Reads an OpenAPI YAML file from disk and parses it.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        InvalidApiDescriptionError: If the document structure is wrong.
    """
    print(f"Loading OpenAPI document from {openapi_path}")
    with open(openapi_path, 'r', encoding='utf-8') as f:
        document = yaml.safe_load(f)
    return parse_api_description(document)


def enrich_api_description(description: ApiDescription, target: IntegrationTarget) -> ApiDescription:
    """
    Returns a copy of the description where every operation invokes the target Lambda.

    Existing integrations are overwritten. Applying this twice with the same
    target gives the same result as applying it once.
    """
    enriched = copy.deepcopy(description)
    extension = IntegrationExtension.for_target(target)

    count = 0
    for path, operation in enriched.operations():
        stale = operation.existing_integration
        if isinstance(stale, dict) and stale.get("uri") not in (None, extension.uri):
            print(f"⚠️ Overwriting existing integration on {operation.method.upper()} {path}")
        operation.integration = extension
        operation.existing_integration = None
        count += 1

    print(f"Attached Lambda proxy integration to {count} operation(s).")
    return enriched
