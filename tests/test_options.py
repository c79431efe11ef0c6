"""Tests for --capabilities/--role-arn parsing."""

from stackctl.models import StackOptions
from stackctl.options import is_modifier, parse_capabilities, split_modifiers


def test_modifiers_are_extracted_and_positionals_kept_in_order():
    options, positional = split_modifiers(
        [
            "--capabilities=CAPABILITY_IAM",
            "web-prod",
            "--role-arn=arn:aws:iam::123:role/deploy",
            "web.json",
        ]
    )

    assert options == StackOptions(
        capabilities=("CAPABILITY_IAM",), role_arn="arn:aws:iam::123:role/deploy"
    )
    assert positional == ["web-prod", "web.json"]


def test_only_first_value_segment_is_kept():
    options, _ = split_modifiers(["--capabilities=CAPABILITY_IAM=ignored", "--role-arn=a=b=c"])

    assert options.capabilities == ("CAPABILITY_IAM",)
    assert options.role_arn == "a"


def test_last_occurrence_wins():
    options, _ = split_modifiers(
        ["--role-arn=first", "--capabilities=CAPABILITY_IAM", "--role-arn=second",
         "--capabilities=CAPABILITY_NAMED_IAM"]
    )

    assert options.role_arn == "second"
    assert options.capabilities == ("CAPABILITY_NAMED_IAM",)


def test_tokens_override_given_options():
    base = StackOptions(capabilities=("CAPABILITY_IAM",), role_arn="from-option")

    options, positional = split_modifiers(["stack", "--role-arn=from-token"], base)

    assert options.role_arn == "from-token"
    assert options.capabilities == ("CAPABILITY_IAM",)
    assert positional == ["stack"]


def test_comma_separated_capabilities():
    assert parse_capabilities("CAPABILITY_IAM,CAPABILITY_AUTO_EXPAND") == (
        "CAPABILITY_IAM",
        "CAPABILITY_AUTO_EXPAND",
    )
    assert parse_capabilities(None) == ()


def test_is_modifier():
    assert is_modifier("--role-arn=x")
    assert is_modifier("--capabilities=x")
    assert not is_modifier("--role-arn")
    assert not is_modifier("web-prod")


def test_as_cli_args():
    options = StackOptions(capabilities=("CAPABILITY_IAM",), role_arn="arn:role")
    assert options.as_cli_args() == ["--capabilities", "CAPABILITY_IAM", "--role-arn", "arn:role"]
    assert StackOptions().as_cli_args() == []
