"""
Perfil de memória e timeout por função
"""
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from .service import ServiceConfig

Number = Union[int, float]

DEFAULT_MEMORY_SIZE = 1024
DEFAULT_TIMEOUT = 6

RADIX_LITERAL = re.compile(r'^0[xXoObB][0-9a-fA-F]+$')


@dataclass(frozen=True)
class FunctionProfile:
    memory_size: Number
    timeout: Number


def _parse_numeric_text(text: str) -> Optional[Number]:
    # Apenas dígitos ASCII, sem separador "_"; aceita literais 0x/0o/0b sem sinal
    if not text.isascii() or '_' in text:
        return None

    try:
        if RADIX_LITERAL.match(text):
            return int(text, 0)
        return float(text)
    except ValueError:
        return None


def to_number(value: Any) -> Optional[Number]:
    """Converte valores numéricos (ou strings numéricas) e descarta o resto"""
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        number = _parse_numeric_text(value.strip())
        if number is None:
            return None
    else:
        return None

    # zero e não-finitos caem para o próximo nível da cadeia
    if not number or not math.isfinite(number):
        return None

    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def resolve_numeric(*candidates: Any, default: Number) -> Number:
    """Primeiro candidato numérico válido, senão o default"""
    for candidate in candidates:
        number = to_number(candidate)
        if number is not None:
            return number
    return default


class FunctionProfiler:
    """Calcula memorySize/timeout de cada função com fallback no provider"""

    def __init__(self, default_memory_size: Number = DEFAULT_MEMORY_SIZE, default_timeout: Number = DEFAULT_TIMEOUT):
        self.default_memory_size = default_memory_size
        self.default_timeout = default_timeout

    def profile(self, service: ServiceConfig) -> List[FunctionProfile]:
        provider = service.provider
        return [
            FunctionProfile(
                memory_size=resolve_numeric(
                    function.memory_size, provider.memory_size, default=self.default_memory_size
                ),
                timeout=resolve_numeric(
                    function.timeout, provider.timeout, default=self.default_timeout
                ),
            )
            for function in service.functions
        ]
