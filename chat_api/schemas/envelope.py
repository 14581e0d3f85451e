"""Response envelope shared by every endpoint: {success, message, data}."""
from __future__ import annotations

import dataclasses
from typing import Any

from fastapi.encoders import jsonable_encoder


def _plain(data: Any) -> Any:
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, (list, tuple)):
        return [_plain(item) for item in data]
    return data


def success(message: str, data: Any = None) -> dict:
    return {"success": True, "message": message, "data": jsonable_encoder(_plain(data))}


def fail(message: str, code: str | None = None) -> dict:
    body = {"success": False, "message": message, "data": None}
    if code:
        body["code"] = code
    return body
