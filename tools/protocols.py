from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared.models import ToolDescriptor, ToolRequest, ToolResult


@runtime_checkable
class Tool(Protocol):
    descriptor: ToolDescriptor

    def handle(self, request: ToolRequest) -> ToolResult: ...
