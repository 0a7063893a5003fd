"""
Stats Collector - Framework usage statistics

Coleta estatísticas anônimas de uso a partir da configuração declarativa de um
serviço (funções, eventos, provider, recursos) e as envia ao serviço de analytics.
"""

__version__ = "1.0.0"
__author__ = "Stats Collector Team"
__description__ = "Anonymous framework usage statistics collector"

from .config import config_manager, ConfigGate, UserConfig
from .service import ServiceConfig, find_service_path, load_service_file
from .profiler import FunctionProfiler
from .classifier import EventClassifier
from .features import detect_features
from .assembler import TelemetryAssembler, Invocation
from .sink import TrackingSink, InMemorySink

__all__ = [
    'config_manager',
    'ConfigGate',
    'UserConfig',
    'ServiceConfig',
    'find_service_path',
    'load_service_file',
    'FunctionProfiler',
    'EventClassifier',
    'detect_features',
    'TelemetryAssembler',
    'Invocation',
    'TrackingSink',
    'InMemorySink'
]
