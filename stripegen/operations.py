"""Build request specifications from `x-stripeOperations` entries.

Each component schema lists the operations acting on it, e.g.

    {"method_name": "retrieve", "method_on": "service", "method_type": "retrieve",
     "operation": "get", "path": "/v1/balance"}

Each supported entry becomes a `RequestSpec`, later rendered as one Rust
function taking a client, the path parameters and a params object.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .errors import GeneratorError, InvariantViolation
from .loader import get_ok_response_schema, get_path_item, get_request_form_parameters, is_ref, resolve_ref
from .mappings import DEFAULT_OVERRIDES, Overrides
from .naming import joined_ident, to_snake_case
from .objects import RustStruct
from .rust_type import ObjectType, RustType, SimpleRustType, SimpleType
from .schema_parser import build_struct_field, infer_schema_or_ref_type

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


class MethodType(Enum):
    RETRIEVE = "retrieve"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CUSTOM = "custom"


class OperationType(Enum):
    GET = "get"
    POST = "post"
    DELETE = "delete"


@dataclass(frozen=True)
class StripeOperation:
    method_name: str
    method_type: MethodType
    method_on: str
    operation: OperationType
    path: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StripeOperation":
        try:
            return cls(
                method_name=data["method_name"],
                method_type=MethodType(data["method_type"]),
                method_on=data["method_on"],
                operation=OperationType(data["operation"]),
                path=data["path"],
            )
        except (KeyError, ValueError) as e:
            raise GeneratorError(f"Invalid x-stripeOperations entry {data!r}: {e}") from e


@dataclass(frozen=True)
class PathParam:
    name: str
    rust_type: SimpleType


@dataclass
class DeleteParams:
    pass


@dataclass
class PostParams:
    body: RustType


@dataclass
class GetParams:
    query: RustType


RequestParams = Union[DeleteParams, PostParams, GetParams]


@dataclass
class RequestSpec:
    operation: StripeOperation
    operation_id: str
    params: RequestParams
    returned: RustType
    path_params: list[PathParam] = field(default_factory=list)
    description: str | None = None

    @property
    def func_name(self) -> str:
        return to_snake_case(self.operation_id)

    @property
    def params_type(self) -> RustType | None:
        if isinstance(self.params, PostParams):
            return self.params.body
        if isinstance(self.params, GetParams):
            return self.params.query
        return None

    def check_path_params(self) -> None:
        """Every `{name}` placeholder must match exactly one declared path param."""
        placeholders = _PLACEHOLDER.findall(self.operation.path)
        declared = [p.name for p in self.path_params]
        if not placeholders and declared:
            raise InvariantViolation(
                f"Path {self.operation.path} has no placeholders but declares "
                f"path params {declared}"
            )
        if sorted(placeholders) != sorted(declared):
            raise InvariantViolation(
                f"Path {self.operation.path} placeholders {placeholders} do not "
                f"match declared path params {declared}"
            )


def should_skip_request(op: StripeOperation) -> bool:
    """Check if an operation is currently unsupported."""
    # A few requests are listed on "collection" as well as "service"; only the
    # service entry is generated to avoid duplicate functions
    return (
        op.method_on != "service"
        # PDF download (binary response)
        or op.method_name == "pdf"
        # File upload (multipart body)
        or (op.method_name == "create" and op.path == "/v1/files")
    )


def parse_operations(schema: dict[str, Any]) -> list[StripeOperation]:
    """Extract the operations attached to a component schema."""
    return [StripeOperation.from_dict(op) for op in schema.get("x-stripeOperations", [])]


def build_requests(
    spec: dict[str, Any],
    operations: list[StripeOperation],
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> list[RequestSpec]:
    """Build a RequestSpec for every supported operation."""
    requests = []
    for op in operations:
        if should_skip_request(op):
            logger.warning("Skipping request at path %s with name %s", op.path, op.method_name)
            continue
        path_item = get_path_item(spec, op.path)
        operation = path_item.get(op.operation.value)
        if operation is None:
            raise GeneratorError(f"Operation {op.operation.value} not found at {op.path}")
        requests.append(build_request(spec, op, operation, overrides))
    return requests


def build_request(
    spec: dict[str, Any],
    op: StripeOperation,
    operation: dict[str, Any],
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> RequestSpec:
    """Build the RequestSpec for one operation."""
    operation_id = operation.get("operationId")
    if not operation_id:
        raise GeneratorError(f"No operationId for {op.operation.value} {op.path}")
    func_name = to_snake_case(operation_id)

    return_schema = get_ok_response_schema(operation)
    if return_schema is None:
        raise GeneratorError(f"Expected schema for 200 response on {op.operation.value} {op.path}")
    returned = infer_schema_or_ref_type(return_schema, None, overrides)

    path_params: list[PathParam] = []
    query_struct = RustStruct()
    for param in operation.get("parameters", []):
        if is_ref(param):
            param = resolve_ref(spec, param["$ref"])
        name = param["name"]
        schema = param.get("schema")
        if schema is None:
            raise GeneratorError(f"Parameter {name} of {op.path} has no schema")
        location = param.get("in")
        typ = infer_schema_or_ref_type(schema, name, overrides)
        if location == "query":
            query_struct.add_field(build_struct_field(typ, name, schema, param.get("required", False)))
        elif location == "path":
            if not isinstance(typ, SimpleRustType):
                raise InvariantViolation(f"Unexpected path parameter type for {name} at {op.path}: {typ!r}")
            path_params.append(PathParam(name=name, rust_type=typ.simple))
        else:
            raise GeneratorError(f"Unexpected parameter location {location!r} for {name} at {op.path}")

    form_params = get_request_form_parameters(operation)
    params: RequestParams
    if op.operation == OperationType.GET:
        if form_params is not None:
            raise GeneratorError(f"Body parameters not supported for GET at {op.path}")
        params = GetParams(query=ObjectType(query_struct, name=joined_ident(func_name, "params")))
    elif op.operation == OperationType.POST:
        if query_struct.fields:
            raise GeneratorError(f"Did not expect query parameters for POST at {op.path}")
        if form_params is None:
            raise GeneratorError(f"POST request should have params: not found for {op.path}")
        body = infer_schema_or_ref_type(form_params, None, overrides)
        if isinstance(body, ObjectType):
            body = ObjectType(body.obj, name=joined_ident(func_name, "params"))
        params = PostParams(body=body)
    else:
        if query_struct.fields:
            raise GeneratorError(f"Query parameters not supported for DELETE at {op.path}")
        if form_params is not None:
            logger.warning("Ignoring body parameters for DELETE at path %s", op.path)
        params = DeleteParams()

    return RequestSpec(
        operation=op,
        operation_id=operation_id,
        params=params,
        returned=returned,
        path_params=path_params,
        description=operation.get("description") or None,
    )
