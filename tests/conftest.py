"""Shared fixtures: a small Stripe-style OpenAPI document.

Covers the shapes the generator has to handle: a plain resource with list
fields (balance), a resource with an id, enums, nested objects, expandable
references and GET/POST/DELETE requests (widget), a polymorphic anyOf
resource and the self-referencing error schema.
"""

from __future__ import annotations

from typing import Any

import pytest

from stripegen.config import GeneratorConfig

_EMPTY_FORM: dict[str, Any] = {
    "content": {
        "application/x-www-form-urlencoded": {
            "schema": {"additionalProperties": False, "properties": {}, "type": "object"},
        }
    },
    "required": False,
}

_EXPAND_PARAM: dict[str, Any] = {
    "description": "Specifies which fields in the response should be expanded.",
    "explode": True,
    "in": "query",
    "name": "expand",
    "required": False,
    "schema": {"items": {"maxLength": 5000, "type": "string"}, "type": "array"},
    "style": "deepObject",
}

_WIDGET_PATH_PARAM: dict[str, Any] = {
    "in": "path",
    "name": "widget",
    "required": True,
    "schema": {"maxLength": 5000, "type": "string"},
    "style": "simple",
}


def _json_response(ref: str) -> dict[str, Any]:
    return {
        "200": {
            "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{ref}"}}},
            "description": "Successful response.",
        }
    }


def make_spec() -> dict[str, Any]:
    """Build a fresh copy of the test spec."""
    return {
        "openapi": "3.0.0",
        "paths": {
            "/v1/balance": {
                "get": {
                    "operationId": "GetBalance",
                    "parameters": [dict(_EXPAND_PARAM)],
                    "requestBody": _EMPTY_FORM,
                    "responses": _json_response("balance"),
                }
            },
            "/v1/widgets": {
                "post": {
                    "description": "<p>Creates a new widget.</p>",
                    "operationId": "PostWidgets",
                    "requestBody": {
                        "content": {
                            "application/x-www-form-urlencoded": {
                                "schema": {
                                    "additionalProperties": False,
                                    "properties": {
                                        "name": {"maxLength": 5000, "type": "string"},
                                        "metadata": {
                                            "additionalProperties": {"type": "string"},
                                            "type": "object",
                                        },
                                    },
                                    "required": ["name"],
                                    "type": "object",
                                }
                            }
                        },
                        "required": True,
                    },
                    "responses": _json_response("widget"),
                }
            },
            "/v1/widgets/{widget}": {
                "get": {
                    "operationId": "GetWidgetsWidget",
                    "parameters": [dict(_EXPAND_PARAM), dict(_WIDGET_PATH_PARAM)],
                    "requestBody": _EMPTY_FORM,
                    "responses": _json_response("widget"),
                },
                "delete": {
                    "operationId": "DeleteWidgetsWidget",
                    "parameters": [dict(_WIDGET_PATH_PARAM)],
                    "requestBody": _EMPTY_FORM,
                    "responses": _json_response("widget"),
                },
            },
        },
        "components": {
            "schemas": {
                "balance": {
                    "description": (
                        "This is an object representing your Stripe balance. "
                        "You can retrieve it to see the balance currently on your Stripe account."
                    ),
                    "properties": {
                        "available": {
                            "description": "Funds that are available to be transferred or paid out.",
                            "items": {"$ref": "#/components/schemas/balance_amount"},
                            "type": "array",
                        },
                        "livemode": {
                            "description": "Has the value `true` if the object exists in live mode.",
                            "type": "boolean",
                        },
                        "object": {"enum": ["balance"], "type": "string"},
                        "pending": {
                            "items": {"$ref": "#/components/schemas/balance_amount"},
                            "type": "array",
                        },
                    },
                    "required": ["available", "livemode", "object", "pending"],
                    "title": "Balance",
                    "type": "object",
                    "x-stripeOperations": [
                        {
                            "method_name": "retrieve",
                            "method_on": "service",
                            "method_type": "retrieve",
                            "operation": "get",
                            "path": "/v1/balance",
                        }
                    ],
                },
                "balance_amount": {
                    "properties": {
                        "amount": {"type": "integer"},
                        "currency": {"type": "string"},
                    },
                    "required": ["amount", "currency"],
                    "title": "BalanceAmount",
                    "type": "object",
                },
                "customer": {
                    "properties": {
                        "email": {"maxLength": 5000, "nullable": True, "type": "string"},
                        "id": {"maxLength": 5000, "type": "string"},
                        "object": {"enum": ["customer"], "type": "string"},
                    },
                    "required": ["id", "object"],
                    "title": "Customer",
                    "type": "object",
                },
                "widget": {
                    "properties": {
                        "id": {"maxLength": 5000, "type": "string"},
                        "object": {"enum": ["widget"], "type": "string"},
                        "status": {
                            "description": "Current status of the widget.",
                            "enum": ["active", "inactive"],
                            "type": "string",
                        },
                        "customer": {
                            "anyOf": [
                                {"maxLength": 5000, "type": "string"},
                                {"$ref": "#/components/schemas/customer"},
                            ],
                            "nullable": True,
                            "x-expansionResources": {
                                "oneOf": [{"$ref": "#/components/schemas/customer"}]
                            },
                        },
                        "settings": {
                            "properties": {
                                "count": {"type": "integer"},
                                "interval": {"enum": ["day", "week"], "type": "string"},
                            },
                            "required": ["count"],
                            "title": "WidgetSettings",
                            "type": "object",
                        },
                        "created": {"format": "unix-time", "type": "integer"},
                        "metadata": {
                            "additionalProperties": {"maxLength": 500, "type": "string"},
                            "type": "object",
                        },
                    },
                    "required": ["id", "object", "status", "settings", "created"],
                    "title": "Widget",
                    "type": "object",
                    "x-stripeOperations": [
                        {
                            "method_name": "retrieve",
                            "method_on": "service",
                            "method_type": "retrieve",
                            "operation": "get",
                            "path": "/v1/widgets/{widget}",
                        },
                        {
                            "method_name": "create",
                            "method_on": "service",
                            "method_type": "create",
                            "operation": "post",
                            "path": "/v1/widgets",
                        },
                        {
                            "method_name": "delete",
                            "method_on": "service",
                            "method_type": "delete",
                            "operation": "delete",
                            "path": "/v1/widgets/{widget}",
                        },
                        {
                            "method_name": "retrieve",
                            "method_on": "collection",
                            "method_type": "retrieve",
                            "operation": "get",
                            "path": "/v1/widgets/{widget}",
                        },
                    ],
                },
                "balance_transaction_source": {
                    "anyOf": [
                        {"$ref": "#/components/schemas/customer"},
                        {"$ref": "#/components/schemas/widget"},
                    ],
                    "title": "Polymorphic",
                },
                "api_errors": {
                    "properties": {
                        "message": {"maxLength": 40000, "type": "string"},
                        "source": {"$ref": "#/components/schemas/api_errors"},
                    },
                    "required": ["message"],
                    "title": "APIErrors",
                    "type": "object",
                },
            }
        },
    }


@pytest.fixture
def spec() -> dict[str, Any]:
    return make_spec()


@pytest.fixture
def config(tmp_path) -> GeneratorConfig:
    """Config writing into a temporary directory, without the Object trait."""
    return GeneratorConfig(out_dir=tmp_path / "generated", emit_object_trait=False)
