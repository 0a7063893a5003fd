"""
Fixtures compartilhadas dos testes.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from stats_collector.environment import CiInfo, HostEnvironment


FIXED_NOW = datetime(2026, 10, 17, 12, 30, 0, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture
def fixed_host():
    """Host fixo para não depender da máquina que roda os testes."""
    return HostEnvironment(
        operating_system="linux",
        runtime_version="3.11.4",
        user_agent="cli",
        is_docker_container=False,
        ci=CiInfo(is_ci=True, name="GitHub Actions"),
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def write_rc(tmp_path):
    """Cria um rc file do usuário e retorna o caminho."""
    def _write(**data):
        path = tmp_path / ".serverlessrc"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_service():
    return {
        "service": "users-api",
        "provider": {
            "name": "aws",
            "runtime": "nodejs8.10",
            "stage": "dev",
            "region": "us-east-1",
            "memorySize": 512,
        },
        "plugins": ["serverless-offline", "serverless-webpack"],
        "custom": {"tableName": "users"},
        "functions": {
            "create": {
                "handler": "handler.create",
                "timeout": 30,
                "events": [
                    {"http": {"path": "users", "method": "post", "authorizer": "aws_iam"}},
                    {"s3": "uploads"},
                ],
            },
            "list": {
                "handler": "handler.list",
                "events": [
                    {"http": {"path": "users", "method": "get", "authorizer": {"name": "authFn"}}},
                    {"s3": "exports"},
                ],
            },
            "cleanup": {
                "handler": "handler.cleanup",
                "memorySize": 256,
            },
        },
        "resources": {
            "Resources": {"UsersTable": {"Type": "AWS::DynamoDB::Table"}},
        },
    }
