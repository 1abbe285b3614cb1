from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.responses import Response

from core.errors import ErrorCode
from core.settings import get_settings

_RESPONSE_DOC_ATTR = "__response_doc_config__"
_GENERIC_CODE = "HTTP_EXCEPTION"


@dataclass(frozen=True)
class ResponseDocConfig:
    message: str
    status_code: int
    description: str
    success_example: Any | None = None
    response_codes: dict[int, str] = field(default_factory=dict)
    error_examples: dict[int, Any] = field(default_factory=dict)


def success_payload(
    data: Any,
    message: str = "Success",
    *,
    meta: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": True, "message": message, "data": data}
    if meta is not None:
        payload["meta"] = meta
    if request_id:
        payload["requestId"] = request_id
    return payload


def error_payload(
    message: str,
    data: Any = None,
    *,
    request_id: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message, "data": data}
    if request_id:
        payload["requestId"] = request_id
    return payload


def error_response(
    *,
    status_code: int,
    message: str,
    data: Any = None,
    headers: dict[str, str] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=jsonable_encoder(error_payload(message=message, data=data, request_id=request_id)),
    )


def expose_server_error_details() -> bool:
    """Server-side failure details (matrix keys, price book paths) are for operators only."""
    settings = get_settings()
    return settings.debug_include_error_details and not settings.is_production


def _split_exception_detail(detail: Any) -> tuple[str, str, Any]:
    """Return (message, code, details) for an ``AppException`` dict or a plain detail."""
    if isinstance(detail, dict) and isinstance(detail.get("message"), str) and detail["message"].strip():
        return detail["message"], detail.get("code", _GENERIC_CODE), detail.get("details")
    if isinstance(detail, str) and detail.strip():
        return detail, _GENERIC_CODE, None
    return "Request failed", _GENERIC_CODE, detail


def _request_id(request: Request | None) -> str | None:
    if request is None:
        return None
    return getattr(request.state, "request_id", None)


def http_exception_response(exc: HTTPException, request: Request | None = None) -> JSONResponse:
    message, code, details = _split_exception_detail(exc.detail)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR and not expose_server_error_details():
        details = None
    return error_response(
        status_code=exc.status_code,
        message=message,
        data={"code": code, "details": details},
        request_id=_request_id(request),
        headers=exc.headers,
    )


def internal_error_response(exc: Exception, request: Request | None = None) -> JSONResponse:
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal Server Error",
        data={
            "code": ErrorCode.INTERNAL_ERROR.value,
            "details": str(exc) if expose_server_error_details() else None,
        },
        request_id=_request_id(request),
    )


def document_response(
    *,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK,
    description: str = "Successful response",
    success_example: Any | None = None,
    response_codes: dict[int, str] | None = None,
    error_examples: dict[int, Any] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Wrap a route's return value in the success envelope and record its OpenAPI examples."""
    config = ResponseDocConfig(
        message=message,
        status_code=status_code,
        description=description,
        success_example=success_example,
        response_codes=dict(response_codes or {}),
        error_examples=dict(error_examples or {}),
    )

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Response:
            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, Response):
                return result

            request = next(
                (value for value in (*kwargs.values(), *args) if isinstance(value, Request)),
                None,
            )
            return JSONResponse(
                status_code=status_code,
                content=jsonable_encoder(
                    success_payload(data=result, message=message, request_id=_request_id(request))
                ),
            )

        setattr(wrapper, _RESPONSE_DOC_ATTR, config)
        return wrapper

    return decorator


def _with_json_example(entry: dict[str, Any], example: Any) -> dict[str, Any]:
    entry = dict(entry)
    content = dict(entry.get("content", {}))
    app_json = dict(content.get("application/json", {}))
    app_json.setdefault("example", example)
    content["application/json"] = app_json
    entry["content"] = content
    return entry


def apply_response_documentation(app: FastAPI) -> None:
    updated = False

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        config = getattr(route.endpoint, _RESPONSE_DOC_ATTR, None)
        if not isinstance(config, ResponseDocConfig):
            continue

        route.status_code = config.status_code
        responses = dict(route.responses or {})

        success = dict(responses.get(config.status_code, {}))
        success.setdefault("description", config.description)
        responses[config.status_code] = _with_json_example(
            success,
            success_payload(data=config.success_example, message=config.message),
        )

        for code, code_description in config.response_codes.items():
            entry = dict(responses.get(code, {}))
            entry.setdefault("description", code_description)
            responses[code] = entry

        for code, example in config.error_examples.items():
            entry = dict(responses.get(code, {}))
            entry.setdefault("description", "Error response")
            responses[code] = _with_json_example(entry, example)

        route.responses = responses
        updated = True

    if updated:
        app.openapi_schema = None
