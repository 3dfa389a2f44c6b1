from __future__ import annotations

import logging
from collections.abc import Mapping

from shared.errors import InvalidParamsError
from shared.models import JSONValue, ParamSpec, ParamType, ToolDescriptor

logger = logging.getLogger("AgriGateway.ParamSchema")


def _matches(value: object, expected: ParamType) -> bool:
    if expected == "string":
        return isinstance(value, str)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "boolean":
        return isinstance(value, bool)
    return isinstance(value, list)


def _check_value(spec: ParamSpec, value: JSONValue) -> None:
    if not _matches(value, spec.type):
        raise InvalidParamsError(f"Parameter '{spec.name}' must be of type {spec.type}.", spec.name)
    if spec.type == "array" and spec.items is not None and isinstance(value, list):
        for item in value:
            if not _matches(item, spec.items):
                raise InvalidParamsError(
                    f"Parameter '{spec.name}' must contain only {spec.items} items.",
                    spec.name,
                )
    if spec.type in ("integer", "number") and isinstance(value, (int, float)):
        if spec.minimum is not None and value < spec.minimum:
            raise InvalidParamsError(
                f"Parameter '{spec.name}' must be >= {spec.minimum}.",
                spec.name,
            )
        if spec.maximum is not None and value > spec.maximum:
            raise InvalidParamsError(
                f"Parameter '{spec.name}' must be <= {spec.maximum}.",
                spec.name,
            )


def validate_arguments(
    descriptor: ToolDescriptor,
    args: Mapping[str, JSONValue],
) -> dict[str, JSONValue]:
    """Check ``args`` against the descriptor and fill declared defaults.

    Optional parameters without a default are left out of the result when the
    caller did not send them, so handlers can tell "absent" from "empty".
    An explicit ``null`` counts as absent.
    """
    if not isinstance(args, Mapping):
        raise InvalidParamsError("Tool arguments must be a JSON object.")

    unknown = sorted(set(args) - set(descriptor.param_names()))
    if unknown:
        logger.debug("unknown_arguments_ignored", extra={"tool": descriptor.name, "keys": unknown})

    resolved: dict[str, JSONValue] = {}
    for spec in descriptor.params:
        value = args.get(spec.name)
        if value is None:
            if spec.required:
                raise InvalidParamsError(f"Missing required parameter '{spec.name}'.", spec.name)
            if spec.default is not None:
                resolved[spec.name] = spec.default
            continue
        _check_value(spec, value)
        resolved[spec.name] = value
    return resolved
