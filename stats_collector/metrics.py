"""
Métricas Prometheus da coleta de estatísticas
"""
import time
from typing import Iterable, Optional
from prometheus_client import Counter, Histogram, Info

# Métricas de aplicação
PAYLOADS_ASSEMBLED = Counter('stats_payloads_assembled_total', 'Total stat payloads assembled')
TRACKING_DISABLED = Counter('stats_tracking_disabled_total', 'Collections skipped because tracking is disabled')
EMITS = Counter('stats_emits_total', 'Stat payload emissions', ['outcome'])
ASSEMBLY_TIME = Histogram('stats_assembly_seconds', 'Time spent assembling stat payloads')

# Métricas de negócio
EVENT_TYPES = Counter('stats_event_types_total', 'Event bindings seen per event type', ['event_type'])

COLLECTOR_INFO = Info('stats_collector', 'Stats collector information')


class StatsMetrics:
    """Registro das métricas, desligável por configuração"""

    def __init__(self, enabled: bool = True, version: Optional[str] = None):
        self.enabled = enabled
        if enabled and version:
            COLLECTOR_INFO.info({'version': version})

    def record_assembled(self, event_counts: Iterable = ()):
        if not self.enabled:
            return
        PAYLOADS_ASSEMBLED.inc()
        for event_count in event_counts:
            EVENT_TYPES.labels(event_type=event_count.name).inc(event_count.count)

    def record_tracking_disabled(self):
        if self.enabled:
            TRACKING_DISABLED.inc()

    def record_emit(self, success: bool):
        if self.enabled:
            EMITS.labels(outcome='sent' if success else 'failed').inc()

    def timer(self) -> "PerformanceTimer":
        return PerformanceTimer(ASSEMBLY_TIME if self.enabled else None)


class PerformanceTimer:
    """Context manager para medir tempo de execução"""

    def __init__(self, histogram: Optional[Histogram] = None):
        self.histogram = histogram
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        if self.histogram is not None:
            self.histogram.observe(self.duration)

    @property
    def duration(self) -> float:
        """Retorna a duração em segundos"""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return 0.0
