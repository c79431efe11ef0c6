"""Read local template and parameters files and canonicalize documents for diffing."""

import json
from pathlib import Path
from typing import Any

from stackctl.exceptions import (
    InvalidTemplateError,
    ParamsNotFoundError,
    TemplateNotFoundError,
    TemplateTooLargeError,
)
from stackctl.models import Parameter, StackContext

# CloudFormation rejects larger TemplateBody values; bigger templates go through S3.
TEMPLATE_BODY_LIMIT = 51200


def read_template(context: StackContext, check_size: bool = True) -> str:
    """Return the template body for a stack, checking it exists.

    With ``check_size`` the body must also fit the inline TemplateBody limit,
    which only matters when the template is about to be submitted.
    """
    path = context.template_path
    if path is None or not path.is_file():
        raise TemplateNotFoundError(context.name, context.searched or ((path,) if path else ()))

    size = path.stat().st_size
    if check_size and size > TEMPLATE_BODY_LIMIT:
        raise TemplateTooLargeError(path, size, TEMPLATE_BODY_LIMIT)

    return path.read_text()


def load_template(context: StackContext) -> Any:
    """Read and parse a stack's JSON template, whatever its size."""
    body = read_template(context, check_size=False)
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidTemplateError(
            f"Template {str(context.template_path)!r} is not valid JSON: {e}"
        ) from e


def read_parameters(path: Path) -> list[Parameter]:
    """Read a parameters file.

    Accepts the CloudFormation CLI form::

        [{"ParameterKey": "Env", "ParameterValue": "prod"}]

    or a flat ``{"Env": "prod"}`` object.
    """
    if not path.is_file():
        raise ParamsNotFoundError(path)

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise InvalidTemplateError(f"Parameters file {str(path)!r} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        return [Parameter(key=k, value=str(v)) for k, v in data.items()]

    if not isinstance(data, list):
        raise InvalidTemplateError(f"Parameters file {str(path)!r} must hold a list or an object.")

    params = []
    for entry in data:
        try:
            params.append(Parameter(key=entry["ParameterKey"], value=str(entry["ParameterValue"])))
        except (KeyError, TypeError) as e:
            raise InvalidTemplateError(
                f"Parameters file {str(path)!r} has an entry without ParameterKey/ParameterValue."
            ) from e
    return params


def context_parameters(context: StackContext) -> list[Parameter]:
    """Parameters for a stack, or none when it has no parameters file."""
    if context.params_path is None:
        return []
    return read_parameters(context.params_path)


def canonicalize(document: Any) -> str:
    """Render a JSON-like document with deep-sorted keys."""
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError:
            return document
    return json.dumps(document, sort_keys=True, indent=2)


def canonical_parameters(params: list[Parameter]) -> str:
    """Render a parameter set in key order, independent of input order."""
    return canonicalize(
        [
            {"ParameterKey": p.key, "ParameterValue": p.value}
            for p in sorted(params, key=lambda p: p.key)
        ]
    )


def to_api_parameters(params: list[Parameter]) -> list[dict[str, str]]:
    return [{"ParameterKey": p.key, "ParameterValue": p.value} for p in params]
