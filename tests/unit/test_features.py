#!/usr/bin/env python3
"""
Testes unitários para a detecção de recursos customizados.
"""

from stats_collector.features import DEFAULT_VARIABLE_SYNTAX, count_plugins, detect_features
from stats_collector.service import ServiceConfig


class TestDetectFeatures:
    """Testes para detect_features."""

    def test_resources_present(self):
        service = ServiceConfig.from_dict({
            "resources": {"Resources": {"Bucket": {"Type": "AWS::S3::Bucket"}}},
        })
        assert detect_features(service).has_custom_resources_defined is True

    def test_outputs_present(self):
        service = ServiceConfig.from_dict({"resources": {"Outputs": {"BucketName": {"Value": "x"}}}})
        assert detect_features(service).has_custom_resources_defined is True

    def test_resources_absent_or_empty(self):
        assert detect_features(ServiceConfig.from_dict({})).has_custom_resources_defined is False

        empty = ServiceConfig.from_dict({"resources": {"Resources": {}, "Outputs": {}}})
        assert detect_features(empty).has_custom_resources_defined is False

    def test_custom_variable_syntax(self):
        custom = ServiceConfig.from_dict({"provider": {"variableSyntax": r"\${{([ ~:a-zA-Z0-9._\'\",\-\/\(\)]+?)}}"}})
        default = ServiceConfig.from_dict({"provider": {"variableSyntax": DEFAULT_VARIABLE_SYNTAX}})
        missing = ServiceConfig.from_dict({"provider": {"name": "aws"}})

        assert detect_features(custom).has_custom_variable_syntax_defined is True
        assert detect_features(default).has_custom_variable_syntax_defined is False
        assert detect_features(missing).has_custom_variable_syntax_defined is False

    def test_custom_section_presence(self):
        assert detect_features(ServiceConfig.from_dict({"custom": {}})).has_variables_in_custom_section_defined
        assert not detect_features(ServiceConfig.from_dict({})).has_variables_in_custom_section_defined

    def test_plugins_count(self):
        service = ServiceConfig.from_dict({"plugins": ["a", "b", "c"]})
        assert detect_features(service).number_of_custom_plugins == 3
        assert detect_features(ServiceConfig.from_dict({})).number_of_custom_plugins == 0

    def test_plugins_mapping_form(self):
        assert count_plugins({"localPath": "./plugins", "modules": ["a", "b"]}) == 2
        assert count_plugins({"localPath": "./plugins", "modules": ["a", "b", "c"]}) == 3
        assert count_plugins({"a": True}) == 1
        assert count_plugins("serverless-offline") == 0
