"""Shared test fixtures."""

import json
from datetime import UTC, datetime, timedelta

import boto3
import pytest
from moto import mock_aws

from stackctl.models import StackEvent


@pytest.fixture
def aws_credentials(monkeypatch):
    """Set dummy AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def cfn_client(aws_credentials):
    """Create a moto-mocked CloudFormation boto3 client."""
    with mock_aws():
        yield boto3.client("cloudformation", region_name="us-east-1")


SIMPLE_TEMPLATE = """{
    "AWSTemplateFormatVersion": "2010-09-09",
    "Resources": {
        "MyQueue": {
            "Type": "AWS::SQS::Queue",
            "Properties": {
                "QueueName": "my-test-queue"
            }
        }
    }
}"""

PARAMETERIZED_TEMPLATE = """{
    "AWSTemplateFormatVersion": "2010-09-09",
    "Parameters": {
        "Env": {"Type": "String"},
        "Size": {"Type": "String"}
    },
    "Resources": {
        "MyTopic": {
            "Type": "AWS::SNS::Topic"
        }
    }
}"""

T0 = datetime(2026, 2, 25, 13, 0, 0, tzinfo=UTC)


def make_event(event_id, logical_id, status, stack_name="demo", seconds=0, **kwargs):
    return StackEvent(
        event_id=event_id,
        stack_name=stack_name,
        logical_id=logical_id,
        resource_type=(
            "AWS::CloudFormation::Stack" if logical_id == stack_name else "AWS::SQS::Queue"
        ),
        status=status,
        timestamp=T0 + timedelta(seconds=seconds),
        **kwargs,
    )


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """A working directory holding templates, as operators run stackctl from one."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path
