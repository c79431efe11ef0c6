"""Parse the --capabilities and --role-arn modifiers out of a token stream."""

from dataclasses import replace

from stackctl.models import StackOptions

ROLE_ARN_FLAG = "--role-arn="
CAPABILITIES_FLAG = "--capabilities="
MODIFIER_FLAGS = (ROLE_ARN_FLAG, CAPABILITIES_FLAG)


def is_modifier(token: str) -> bool:
    """True if the token is a --role-arn=... or --capabilities=... flag."""
    return token.startswith(MODIFIER_FLAGS)


def modifier_value(raw: str) -> str:
    """Keep only the first '='-delimited segment of a modifier value."""
    return raw.split("=", 1)[0]


def parse_capabilities(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(c for c in modifier_value(raw).split(",") if c)


def split_modifiers(
    tokens: list[str] | tuple[str, ...],
    options: StackOptions | None = None,
) -> tuple[StackOptions, list[str]]:
    """Pull modifier flags out of tokens.

    Returns the updated options and the remaining positional tokens, in their
    original order. When a flag appears more than once the last one wins.
    """
    options = options or StackOptions()
    positional = []
    for token in tokens:
        if token.startswith(ROLE_ARN_FLAG):
            options = replace(options, role_arn=modifier_value(token[len(ROLE_ARN_FLAG) :]) or None)
        elif token.startswith(CAPABILITIES_FLAG):
            options = replace(
                options, capabilities=parse_capabilities(token[len(CAPABILITIES_FLAG) :])
            )
        else:
            positional.append(token)
    return options, positional
