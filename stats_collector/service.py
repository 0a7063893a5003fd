"""
Modelo da configuração declarativa do serviço (serverless.yml)
Converte o mapeamento bruto em estruturas imutáveis usadas pela coleta
"""
import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple
import structlog
import yaml

logger = structlog.get_logger(__name__)

SERVICE_FILE_NAMES = ('serverless.yml', 'serverless.yaml', 'serverless.json')


@dataclass(frozen=True)
class ProviderSpec:
    name: Any = None
    runtime: Any = None
    stage: Any = None
    region: Any = None
    variable_syntax: Any = None
    memory_size: Any = None
    timeout: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ProviderSpec":
        if isinstance(raw, str):
            return cls(name=raw)
        if not isinstance(raw, Mapping):
            return cls()
        return cls(
            name=raw.get('name'),
            runtime=raw.get('runtime'),
            stage=raw.get('stage'),
            region=raw.get('region'),
            variable_syntax=raw.get('variableSyntax'),
            memory_size=raw.get('memorySize'),
            timeout=raw.get('timeout'),
        )


@dataclass(frozen=True)
class EventBinding:
    """Evento declarado numa função: {"http": {...}}, {"s3": "bucket"}, ..."""

    name: str
    descriptor: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["EventBinding"]:
        if isinstance(raw, str) and raw:
            return cls(name=raw)
        if isinstance(raw, Mapping) and raw:
            name = next(iter(raw))
            return cls(name=str(name), descriptor=raw[name])
        return None


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    memory_size: Any = None
    timeout: Any = None
    # None quando a função não declara a chave "events"
    events: Optional[Tuple[EventBinding, ...]] = None

    @classmethod
    def from_raw(cls, name: str, raw: Any) -> "FunctionSpec":
        if not isinstance(raw, Mapping):
            return cls(name=name)

        events = None
        raw_events = raw.get('events')
        if isinstance(raw_events, (list, tuple)):
            bindings = []
            for raw_event in raw_events:
                binding = EventBinding.from_raw(raw_event)
                if binding is None:
                    logger.debug("Evento malformado ignorado", function=name)
                    continue
                bindings.append(binding)
            events = tuple(bindings)

        return cls(
            name=name,
            memory_size=raw.get('memorySize'),
            timeout=raw.get('timeout'),
            events=events,
        )


@dataclass(frozen=True)
class ServiceConfig:
    """Snapshot imutável de um serviço para uma coleta"""

    provider: ProviderSpec = field(default_factory=ProviderSpec)
    functions: Tuple[FunctionSpec, ...] = ()
    resources: Any = None
    plugins: Any = None
    custom: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "ServiceConfig":
        if not isinstance(data, Mapping):
            return cls()

        raw_functions = data.get('functions')
        functions: Tuple[FunctionSpec, ...] = ()
        if isinstance(raw_functions, Mapping):
            functions = tuple(
                FunctionSpec.from_raw(str(name), raw)
                for name, raw in raw_functions.items()
            )

        return cls(
            provider=ProviderSpec.from_raw(data.get('provider')),
            functions=functions,
            resources=data.get('resources'),
            plugins=data.get('plugins'),
            custom=data.get('custom'),
        )


def find_service_path(cwd: Optional[str] = None) -> Optional[str]:
    """Retorna o diretório se ele contém um arquivo de serviço"""
    directory = Path(cwd or os.getcwd())

    for file_name in SERVICE_FILE_NAMES:
        if (directory / file_name).is_file():
            return str(directory)

    return None


def load_service_file(service_path: str) -> Dict[str, Any]:
    """Carrega o arquivo de serviço (YAML ou JSON) de um diretório"""
    directory = Path(service_path)

    for file_name in SERVICE_FILE_NAMES:
        path = directory / file_name
        if not path.is_file():
            continue

        content = path.read_text(encoding='utf-8')
        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Arquivo de serviço inválido {path}: {e}") from e

        logger.debug("Arquivo de serviço carregado", path=str(path))
        return data if isinstance(data, dict) else {}

    raise FileNotFoundError(f"Nenhum arquivo de serviço encontrado em {service_path}")
