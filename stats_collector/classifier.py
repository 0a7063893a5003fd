"""
Classificação de eventos das funções
Conta eventos por tipo e identifica os tipos de authorizer usados em eventos HTTP
"""
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, List, Mapping, Optional, Tuple, Union
import structlog

from .service import ServiceConfig

logger = structlog.get_logger(__name__)

HTTP_EVENT = "http"
IAM_AUTHORIZER = "AWS_IAM"
COGNITO_ARN_MARKER = "arn:aws:cognito-idp"
LAMBDA_ARN_MARKER = "arn:aws:lambda"


@dataclass(frozen=True)
class StringAuthorizer:
    """authorizer: "AWS_IAM" | nome da função | ARN"""

    text: str


@dataclass(frozen=True)
class ObjectAuthorizer:
    """authorizer: {type, name, arn}"""

    type: Optional[str] = None
    name: Any = None
    arn: Optional[str] = None


AuthorizerSpec = Union[StringAuthorizer, ObjectAuthorizer]


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def parse_authorizer(raw: Any) -> Optional[AuthorizerSpec]:
    """Converte o valor bruto do authorizer na variante correspondente"""
    if not raw:
        return None
    if isinstance(raw, str):
        return StringAuthorizer(raw)
    if isinstance(raw, Mapping):
        return ObjectAuthorizer(
            type=_text(raw.get('type')),
            name=raw.get('name'),
            arn=_text(raw.get('arn')),
        )
    return None


def is_iam_authorizer(spec: AuthorizerSpec) -> bool:
    if isinstance(spec, StringAuthorizer):
        return spec.text.upper() == IAM_AUTHORIZER
    return spec.type is not None and spec.type.upper() == IAM_AUTHORIZER


def is_custom_authorizer(spec: AuthorizerSpec) -> bool:
    # Três formas de declarar um authorizer customizado:
    # 1) nome ou ARN da função direto em "authorizer"
    # 2) nome da função em "authorizer.name"
    # 3) ARN de uma função Lambda em "authorizer.arn"
    if isinstance(spec, StringAuthorizer):
        return spec.text.upper() != IAM_AUTHORIZER and COGNITO_ARN_MARKER not in spec.text
    return bool(spec.name) or (spec.arn is not None and LAMBDA_ARN_MARKER in spec.arn)


def is_cognito_authorizer(spec: AuthorizerSpec) -> bool:
    if isinstance(spec, StringAuthorizer):
        return COGNITO_ARN_MARKER in spec.text
    return spec.arn is not None and COGNITO_ARN_MARKER in spec.arn


@dataclass(frozen=True)
class AuthorizerClassification:
    has_iam_authorizer: bool = False
    has_custom_authorizer: bool = False
    has_cognito_authorizer: bool = False

    def including(self, spec: AuthorizerSpec) -> "AuthorizerClassification":
        """Acumula (OR) as flags de um authorizer"""
        return replace(
            self,
            has_iam_authorizer=self.has_iam_authorizer or is_iam_authorizer(spec),
            has_custom_authorizer=self.has_custom_authorizer or is_custom_authorizer(spec),
            has_cognito_authorizer=self.has_cognito_authorizer or is_cognito_authorizer(spec),
        )


@dataclass(frozen=True)
class EventTypeCount:
    name: str
    count: int


@dataclass(frozen=True)
class EventSummary:
    event_counts: Tuple[EventTypeCount, ...] = ()
    event_names_per_function: Tuple[Tuple[str, ...], ...] = ()
    authorizers: AuthorizerClassification = field(default_factory=AuthorizerClassification)

    @property
    def number_of_events(self) -> int:
        """Número de tipos distintos de evento"""
        return len(self.event_counts)


class EventClassifier:
    """Percorre os eventos de todas as funções do serviço"""

    def classify(self, service: ServiceConfig) -> EventSummary:
        tally: Counter = Counter()
        names_per_function: List[Tuple[str, ...]] = []
        authorizers = AuthorizerClassification()

        for function in service.functions:
            if function.events is None:
                continue

            names = []
            for binding in function.events:
                names.append(binding.name)
                tally[binding.name] += 1

                if binding.name == HTTP_EVENT and isinstance(binding.descriptor, Mapping):
                    spec = parse_authorizer(binding.descriptor.get('authorizer'))
                    if spec is not None:
                        authorizers = authorizers.including(spec)

            names_per_function.append(tuple(names))

        summary = EventSummary(
            event_counts=tuple(EventTypeCount(name, count) for name, count in tally.items()),
            event_names_per_function=tuple(names_per_function),
            authorizers=authorizers,
        )

        logger.debug(
            "Eventos classificados",
            event_types=summary.number_of_events,
            functions_with_events=len(names_per_function)
        )
        return summary
