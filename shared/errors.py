from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

from shared.models import ErrorKind, JSONValue


class GatewayError(Exception):
    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def details(self) -> dict[str, JSONValue]:
        return {}


class ConfigurationError(GatewayError):
    kind = ErrorKind.CONFIGURATION

    def __init__(self, setting: str) -> None:
        super().__init__(f"Configuration error: {setting} not set in environment.")
        self.setting = setting

    def details(self) -> dict[str, JSONValue]:
        return {"setting": self.setting}


class UpstreamHttpError(GatewayError):
    kind = ErrorKind.UPSTREAM_HTTP

    def __init__(self, status: int, body: str, source: str) -> None:
        super().__init__(f"HTTP {status} fetching {source}: {body}")
        self.status = status
        self.body = body
        self.source = source

    def details(self) -> dict[str, JSONValue]:
        return {"status": self.status}


class UpstreamFormatError(GatewayError):
    kind = ErrorKind.UPSTREAM_FORMAT

    def __init__(self, raw_body: str, source: str) -> None:
        super().__init__(f"Invalid JSON response from {source}: {raw_body}")
        self.raw_body = raw_body
        self.source = source

    def details(self) -> dict[str, JSONValue]:
        return {"raw_body": self.raw_body}


class UpstreamUnreachableError(GatewayError):
    kind = ErrorKind.UPSTREAM_UNREACHABLE

    def __init__(self, reason: str, source: str) -> None:
        super().__init__(f"Failed to reach {source}: {reason}")
        self.reason = reason
        self.source = source


class ToolNotFoundError(GatewayError):
    kind = ErrorKind.TOOL_NOT_FOUND

    def __init__(self, name: str, available: Sequence[str]) -> None:
        super().__init__(f"Tool '{name}' not found")
        self.name = name
        self.available = list(available)

    def details(self) -> dict[str, JSONValue]:
        return {"available_tools": list(self.available)}


class InvalidParamsError(GatewayError):
    kind = ErrorKind.INVALID_PARAMS

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def details(self) -> dict[str, JSONValue]:
        return {"field": self.field} if self.field else {}


class MalformedRequestError(GatewayError):
    kind = ErrorKind.MALFORMED_REQUEST
