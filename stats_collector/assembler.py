"""
Montagem do evento de estatísticas de uso (framework_stat)
Coordena perfil de funções, classificação de eventos e detecção de recursos
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple
import structlog

from . import __version__
from .classifier import AuthorizerClassification, EventClassifier
from .config import ConfigGate, StatsSettings, UserConfig
from .environment import HostEnvironment, timezone_label
from .features import detect_features
from .metrics import StatsMetrics
from .payload import (
    AwsInfo,
    CommandInfo,
    EventCount,
    EventsInfo,
    FunctionsInfo,
    GeneralInfo,
    MemorySizeAndTimeout,
    ProviderInfo,
    ServiceInfo,
    StatProperties,
    TelemetryPayload,
)
from .profiler import FunctionProfiler
from .service import ServiceConfig

logger = structlog.get_logger(__name__)

WHITELISTED_OPTION_KEYS = ('help', 'disable', 'enable')


@dataclass(frozen=True)
class Invocation:
    """Comando do CLI que disparou a coleta"""

    commands: Tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)
    service_path: Optional[str] = None
    framework_version: Optional[str] = None


def filter_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Mantém apenas as opções da whitelist"""
    return {
        key: value
        for key, value in (options or {}).items()
        if key in WHITELISTED_OPTION_KEYS
    }


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class TelemetryAssembler:
    """Montador do payload de estatísticas"""

    def __init__(
        self,
        settings: StatsSettings,
        config_gate: ConfigGate,
        sink,
        metrics: Optional[StatsMetrics] = None,
        host_probe: Optional[Callable[[], HostEnvironment]] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.settings = settings
        self.config_gate = config_gate
        self.sink = sink
        self.metrics = metrics or StatsMetrics(settings.enable_metrics, __version__)
        self.host_probe = host_probe or (lambda: HostEnvironment.detect(settings.dashboard_env_var))
        self.clock = clock or (lambda: datetime.now().astimezone())

        self.profiler = FunctionProfiler()
        self.classifier = EventClassifier()

        # Envios em andamento (fire-and-forget)
        self._pending: Set[asyncio.Task] = set()

        self.stats = {
            'assembled': 0,
            'skipped': 0,
            'emit_errors': 0
        }

    def assemble(
        self,
        service: ServiceConfig,
        invocation: Invocation,
        user_config: UserConfig,
        context: Optional[str] = None
    ) -> Optional[TelemetryPayload]:
        """Monta o payload; retorna None quando o tracking está desabilitado"""
        if user_config.tracking_disabled:
            logger.debug("Tracking desabilitado, coleta ignorada")
            self.stats['skipped'] += 1
            self.metrics.record_tracking_disabled()
            return None

        with self.metrics.timer():
            profiles = self.profiler.profile(service)
            summary = self.classifier.classify(service)
            features = detect_features(service)
            host = self.host_probe()
            now = self.clock()

            provider = service.provider
            user_id = _as_text(user_config.framework_id)

            properties = StatProperties(
                command=CommandInfo(
                    name=" ".join(invocation.commands),
                    filtered_options=filter_options(invocation.options),
                    is_run_in_service=bool(invocation.service_path),
                ),
                service=ServiceInfo(
                    number_of_custom_plugins=features.number_of_custom_plugins,
                    has_custom_resources_defined=features.has_custom_resources_defined,
                    has_variables_in_custom_section_defined=features.has_variables_in_custom_section_defined,
                    has_custom_variable_syntax_defined=features.has_custom_variable_syntax_defined,
                ),
                provider=ProviderInfo(
                    name=provider.name,
                    runtime=provider.runtime,
                    stage=provider.stage,
                    region=provider.region,
                ),
                functions=FunctionsInfo(
                    number_of_functions=len(service.functions),
                    memory_size_and_timeout_per_function=tuple(
                        MemorySizeAndTimeout(memory_size=profile.memory_size, timeout=profile.timeout)
                        for profile in profiles
                    ),
                ),
                events=EventsInfo(
                    number_of_events=summary.number_of_events,
                    number_of_events_per_type=tuple(
                        EventCount(name=event_count.name, count=event_count.count)
                        for event_count in summary.event_counts
                    ),
                    event_names_per_function=summary.event_names_per_function,
                ),
                general=GeneralInfo(
                    user_id=user_id,
                    context=context or self.settings.default_context,
                    timestamp=int(now.timestamp() * 1000),
                    timezone=timezone_label(now),
                    operating_system=host.operating_system,
                    user_agent=host.user_agent,
                    serverless_version=invocation.framework_version or __version__,
                    node_js_version=host.runtime_version,
                    is_docker_container=host.is_docker_container,
                    is_ci_system=host.ci.is_ci,
                    ci_system=host.ci.name,
                    platform_id=_as_text(user_config.user_id) or None,
                ),
                aws=self._aws_section(provider.name, summary.authorizers),
            )

            payload = TelemetryPayload(user_id=user_id, properties=properties)

        self.stats['assembled'] += 1
        self.metrics.record_assembled(summary.event_counts)

        logger.info(
            "Estatísticas montadas",
            command=properties.command.name,
            context=properties.general.context,
            functions=properties.functions.number_of_functions,
            event_types=properties.events.number_of_events
        )
        return payload

    def _aws_section(self, provider_name: Any, authorizers: AuthorizerClassification) -> Optional[AwsInfo]:
        if not isinstance(provider_name, str) or provider_name.upper() != 'AWS':
            return None
        return AwsInfo(
            has_iam_authorizer=authorizers.has_iam_authorizer,
            has_custom_authorizer=authorizers.has_custom_authorizer,
            has_cognito_authorizer=authorizers.has_cognito_authorizer,
        )

    async def log_stat(
        self,
        service: ServiceConfig,
        invocation: Invocation,
        context: Optional[str] = None
    ) -> Optional[TelemetryPayload]:
        """Coleta e envia as estatísticas sem aguardar a entrega"""
        user_config = self.config_gate.read()
        payload = self.assemble(service, invocation, user_config, context)

        if payload is not None:
            self._dispatch(payload)

        return payload

    def _dispatch(self, payload: TelemetryPayload):
        task = asyncio.create_task(self.sink.emit(payload))
        self._pending.add(task)
        task.add_done_callback(self._on_emit_done)

    def _on_emit_done(self, task: asyncio.Task):
        self._pending.discard(task)

        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            logger.error("Erro no envio de estatísticas", error=str(error))
            self.stats['emit_errors'] += 1
            self.metrics.record_emit(False)
            return

        self.metrics.record_emit(bool(task.result()))

    async def drain(self):
        """Aguarda envios pendentes (usado no shutdown)"""
        if not self._pending:
            return

        logger.debug("Aguardando envios pendentes", count=len(self._pending))
        await asyncio.gather(*list(self._pending), return_exceptions=True)

    def get_stats(self) -> Dict[str, Any]:
        """Retorna estatísticas do montador"""
        stats = self.stats.copy()
        stats['pending_emits'] = len(self._pending)
        return stats
