"""Builds a minimal OpenAPI spec from existing Pydantic schemas."""
from __future__ import annotations

from typing import Any, Dict

from flask import current_app, request

from ..api.users.schemas import UserIn, UserOut

API_TITLE = "User Service API"
API_VERSION = "1.0.0"

_REF = "#/components/schemas/{model}"


def _schemas() -> Dict[str, Any]:
    return {
        "UserIn": UserIn.model_json_schema(ref_template=_REF),
        "UserOut": UserOut.model_json_schema(ref_template=_REF, mode="serialization", by_alias=True),
        "ApiError": {
            "type": "object",
            "properties": {
                "timestamp": {"type": "string"},
                "status": {"type": "integer"},
                "error": {"type": "string"},
                "message": {"type": "string"},
                "path": {"type": "string"},
            },
        },
    }


def _envelope(data_schema: Dict[str, Any] | None) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "statusCode": {"type": "integer"},
            "status": {"type": "string", "example": "SUCCESS"},
            "message": {"type": "string"},
            "data": data_schema or {"nullable": True},
        },
    }


def _ok(description: str, data_schema: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {"description": description, "content": {"application/json": {"schema": _envelope(data_schema)}}}


def _error(description: str) -> Dict[str, Any]:
    return {
        "description": description,
        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/ApiError"}}},
    }


def build_openapi() -> Dict[str, Any]:
    base_url = f"{request.scheme}://{request.host}"
    users = f"{current_app.config['API_PREFIX']}/users"
    user_ref = {"$ref": "#/components/schemas/UserOut"}
    user_list = {"type": "array", "items": user_ref}
    body = {"required": True, "content": {"application/json": {"schema": {"$ref": "#/components/schemas/UserIn"}}}}
    id_param = [{"name": "user_id", "in": "path", "required": True, "schema": {"type": "string"}}]
    return {
        "openapi": "3.0.3",
        "info": {"title": API_TITLE, "version": API_VERSION},
        "servers": [{"url": base_url}],
        "tags": [{"name": "Health"}, {"name": "Users"}],
        "paths": {
            "/api/health/": {
                "get": {"tags": ["Health"], "summary": "Liveness probe", "responses": {"200": {"description": "OK"}}}
            },
            "/api/health/storage": {
                "get": {"tags": ["Health"], "summary": "Storage backend status", "responses": {"200": {"description": "Status"}}}
            },
            users: {
                "get": {"tags": ["Users"], "summary": "List users", "responses": {"200": _ok("Users fetched", user_list)}},
                "post": {
                    "tags": ["Users"], "summary": "Create user", "requestBody": body,
                    "responses": {
                        "201": _ok("User created", user_ref),
                        "400": _error("Validation failed"),
                        "409": _error("Email already exists"),
                    },
                },
            },
            f"{users}/search": {
                "get": {
                    "tags": ["Users"], "summary": "Find users by exactly one criterion",
                    "parameters": [
                        {"name": n, "in": "query", "required": False, "schema": {"type": "string"}}
                        for n in ("email", "role", "status", "name", "emailDomain", "createdAfter")
                    ],
                    "responses": {"200": _ok("Users fetched", user_list), "400": _error("Bad criteria")},
                }
            },
            f"{users}/{{user_id}}": {
                "parameters": id_param,
                "get": {
                    "tags": ["Users"], "summary": "Get user by id",
                    "responses": {"200": _ok("User fetched", user_ref), "404": _error("Not found")},
                },
                "put": {
                    "tags": ["Users"], "summary": "Replace user fields", "requestBody": body,
                    "responses": {
                        "200": _ok("User updated", user_ref),
                        "400": _error("Validation failed"),
                        "404": _error("Not found"),
                        "409": _error("Email already exists"),
                    },
                },
                "delete": {
                    "tags": ["Users"], "summary": "Delete user",
                    "responses": {"200": _ok("User deleted"), "404": _error("Not found")},
                },
            },
        },
        "components": {"schemas": _schemas()},
    }
