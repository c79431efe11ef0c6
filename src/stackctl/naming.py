"""Resolve a stack name to its template and parameters files.

A stack named ``web-prod`` is deployed from ``web-prod.json`` when it exists,
otherwise from ``web.json``. Its parameters live next to the template in
``web-params-prod.json``.
"""

import logging
from pathlib import Path

from stackctl.exceptions import MissingStackError
from stackctl.models import StackContext
from stackctl.options import is_modifier

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".json"


def stack_name_from(arg: str | None) -> str:
    """Basename of the argument with its extension stripped."""
    if not arg or is_modifier(arg):
        raise MissingStackError()
    name = Path(arg).stem
    if not name:
        raise MissingStackError()
    return name


def template_candidates(name: str, directory: Path) -> list[Path]:
    candidates = [directory / f"{name}{TEMPLATE_SUFFIX}"]
    base, sep, _env = name.rpartition("-")
    if sep and base:
        candidates.append(directory / f"{base}{TEMPLATE_SUFFIX}")
    return candidates


def params_path_for(name: str, template_path: Path) -> Path | None:
    """Derive the conventional parameters file for a stack and template.

    ``web-prod`` with ``web.json`` gives ``web-params-prod.json``; ``web``
    with ``web.json`` gives ``web-params.json``.
    """
    base = template_path.stem
    if not base or base not in name:
        return None
    return template_path.with_name(name.replace(base, f"{base}-params", 1) + TEMPLATE_SUFFIX)


def resolve_stack(
    stack_arg: str | None,
    template_arg: str | None = None,
    params_arg: str | None = None,
) -> StackContext:
    """Build the StackContext for the given positional arguments."""
    name = stack_name_from(stack_arg)

    if template_arg:
        if is_modifier(template_arg):
            raise MissingStackError()
        template_path = Path(template_arg)
        searched: tuple[Path, ...] = (template_path,)
    else:
        candidates = template_candidates(name, Path(stack_arg).parent)
        searched = tuple(candidates)
        template_path = next((c for c in candidates if c.is_file()), None)

    if params_arg:
        params_path = Path(params_arg)
    elif template_path is not None:
        params_path = params_path_for(name, template_path)
        if params_path is not None and not params_path.is_file():
            params_path = None
    else:
        params_path = None

    logger.debug(
        "Resolved stack %s: template=%s params=%s", name, template_path, params_path
    )
    return StackContext(
        name=name,
        template_path=template_path,
        params_path=params_path,
        searched=searched,
    )
