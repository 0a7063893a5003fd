"""
Detecção de recursos customizados declarados no serviço
"""
from dataclasses import dataclass
from typing import Any, Mapping

from .service import ServiceConfig

DEFAULT_VARIABLE_SYNTAX = r'\${([ :a-zA-Z0-9._,\-\/\(\)]+?)}'


@dataclass(frozen=True)
class ServiceFeatures:
    number_of_custom_plugins: int = 0
    has_custom_resources_defined: bool = False
    has_variables_in_custom_section_defined: bool = False
    has_custom_variable_syntax_defined: bool = False


def _has_entries(value: Any) -> bool:
    return isinstance(value, Mapping) and len(value) > 0


def count_plugins(plugins: Any) -> int:
    """
    Conta os plugins declarados.

    Na forma mapeada ({localPath: ..., modules: [a, b]}) conta os módulos,
    não as chaves do mapeamento; `localPath` não é um plugin.
    """
    if isinstance(plugins, Mapping):
        modules = plugins.get('modules')
        if isinstance(modules, (list, tuple)):
            return len(modules)
        return len(plugins)
    if isinstance(plugins, (list, tuple)):
        return len(plugins)
    return 0


def detect_features(service: ServiceConfig) -> ServiceFeatures:
    resources = service.resources
    has_custom_resources = isinstance(resources, Mapping) and (
        _has_entries(resources.get('Resources')) or _has_entries(resources.get('Outputs'))
    )

    variable_syntax = service.provider.variable_syntax

    return ServiceFeatures(
        number_of_custom_plugins=count_plugins(service.plugins),
        has_custom_resources_defined=has_custom_resources,
        has_variables_in_custom_section_defined=service.custom is not None,
        has_custom_variable_syntax_defined=bool(variable_syntax) and variable_syntax != DEFAULT_VARIABLE_SYNTAX,
    )
