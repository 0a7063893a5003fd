#!/usr/bin/env python3
"""
Testes unitários para o modelo do serviço e descoberta de arquivos.
"""

import json

import pytest
from stats_collector.service import (
    EventBinding,
    ServiceConfig,
    find_service_path,
    load_service_file,
)


class TestServiceConfig:
    """Testes para ServiceConfig.from_dict."""

    def test_from_dict(self, sample_service):
        service = ServiceConfig.from_dict(sample_service)

        assert service.provider.name == "aws"
        assert service.provider.memory_size == 512
        assert [f.name for f in service.functions] == ["create", "list", "cleanup"]
        assert service.functions[0].events[1] == EventBinding(name="s3", descriptor="uploads")
        assert service.functions[2].events is None

    def test_provider_as_string(self):
        assert ServiceConfig.from_dict({"provider": "aws"}).provider.name == "aws"

    def test_malformed_input(self):
        service = ServiceConfig.from_dict(["not", "a", "mapping"])
        assert service.functions == ()
        assert service.provider.name is None

    def test_malformed_events_are_skipped(self):
        service = ServiceConfig.from_dict({
            "functions": {"a": {"events": [{}, None, 42, "schedule", {"sqs": "arn"}]}},
        })
        names = [binding.name for binding in service.functions[0].events]
        assert names == ["schedule", "sqs"]

    def test_input_is_not_mutated(self, sample_service):
        snapshot = json.dumps(sample_service, sort_keys=True)
        ServiceConfig.from_dict(sample_service)
        assert json.dumps(sample_service, sort_keys=True) == snapshot


class TestServiceFiles:
    """Testes para find_service_path e load_service_file."""

    def test_find_service_path(self, tmp_path):
        assert find_service_path(str(tmp_path)) is None

        (tmp_path / "serverless.yaml").write_text("service: demo\n", encoding="utf-8")
        assert find_service_path(str(tmp_path)) == str(tmp_path)

    def test_load_yaml(self, tmp_path):
        (tmp_path / "serverless.yml").write_text(
            "service: demo\nprovider:\n  name: aws\nfunctions:\n  hello:\n    handler: h.hello\n",
            encoding="utf-8"
        )
        data = load_service_file(str(tmp_path))
        assert data["provider"]["name"] == "aws"
        assert "hello" in data["functions"]

    def test_yml_takes_precedence_over_json(self, tmp_path):
        (tmp_path / "serverless.yml").write_text("service: from-yml\n", encoding="utf-8")
        (tmp_path / "serverless.json").write_text(json.dumps({"service": "from-json"}), encoding="utf-8")
        assert load_service_file(str(tmp_path))["service"] == "from-yml"

    def test_load_json(self, tmp_path):
        (tmp_path / "serverless.json").write_text(json.dumps({"service": "demo"}), encoding="utf-8")
        assert load_service_file(str(tmp_path)) == {"service": "demo"}

    def test_invalid_file(self, tmp_path):
        (tmp_path / "serverless.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_service_file(str(tmp_path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_service_file(str(tmp_path))
