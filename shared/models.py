from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from shared.errors import GatewayError

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

ParamType = Literal["string", "integer", "number", "boolean", "array"]


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration_error"
    UPSTREAM_HTTP = "upstream_http_error"
    UPSTREAM_FORMAT = "upstream_format_error"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    TOOL_NOT_FOUND = "tool_not_found"
    INVALID_PARAMS = "invalid_params"
    MALFORMED_REQUEST = "malformed_request"
    INTERNAL = "internal_error"


@dataclass(frozen=True)
class ToolRequest:
    name: str
    args: dict[str, JSONValue] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolSuccess:
    data: dict[str, JSONValue] = field(default_factory=dict)

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True)
class ToolFailure:
    kind: ErrorKind
    message: str
    details: dict[str, JSONValue] = field(default_factory=dict)

    @property
    def ok(self) -> Literal[False]:
        return False

    @classmethod
    def from_error(cls, error: GatewayError) -> ToolFailure:
        return cls(kind=error.kind, message=str(error), details=error.details())

    @classmethod
    def internal(cls, exc: BaseException) -> ToolFailure:
        return cls(kind=ErrorKind.INTERNAL, message=f"Server error: {exc}")


ToolResult = ToolSuccess | ToolFailure


@dataclass(frozen=True)
class ParamSpec:
    name: str
    type: ParamType
    description: str
    required: bool = False
    default: JSONValue = None
    items: ParamType | None = None
    minimum: int | None = None
    maximum: int | None = None

    def to_schema(self) -> dict[str, JSONValue]:
        schema: dict[str, JSONValue] = {"type": self.type, "description": self.description}
        if self.items is not None:
            schema["items"] = {"type": self.items}
        if self.default is not None:
            schema["default"] = self.default
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema

    def to_doc(self) -> str:
        presence = "required" if self.required else "optional"
        text = f"{self.type} ({presence}) - {self.description}"
        if self.default is not None:
            text += f" (default: {self.default})"
        return text


@dataclass(frozen=True)
class ToolDescriptor:
    """Static description of a tool, shared by discovery on both front-ends."""

    name: str
    description: str
    params: tuple[ParamSpec, ...]
    example: Mapping[str, JSONValue] = field(default_factory=dict)

    def param_names(self) -> tuple[str, ...]:
        return tuple(param.name for param in self.params)

    def to_schema(self) -> dict[str, JSONValue]:
        properties: dict[str, JSONValue] = {param.name: param.to_schema() for param in self.params}
        required: list[JSONValue] = [param.name for param in self.params if param.required]
        return {"type": "object", "properties": properties, "required": required}

    def to_doc(self) -> dict[str, JSONValue]:
        return {param.name: param.to_doc() for param in self.params}
