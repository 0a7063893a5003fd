"""
Modelos do evento framework_stat enviado ao serviço de analytics
"""
from typing import Any, Dict, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field

STAT_EVENT = "framework_stat"
PAYLOAD_VERSION = 2

Number = Union[int, float]


class PayloadModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CommandInfo(PayloadModel):
    name: str = ""
    filtered_options: Dict[str, Any] = Field(default_factory=dict, alias="filteredOptions")
    is_run_in_service: bool = Field(default=False, alias="isRunInService")


class ServiceInfo(PayloadModel):
    number_of_custom_plugins: int = Field(alias="numberOfCustomPlugins")
    has_custom_resources_defined: bool = Field(alias="hasCustomResourcesDefined")
    has_variables_in_custom_section_defined: bool = Field(alias="hasVariablesInCustomSectionDefined")
    has_custom_variable_syntax_defined: bool = Field(alias="hasCustomVariableSyntaxDefined")


class ProviderInfo(PayloadModel):
    name: Any = None
    runtime: Any = None
    stage: Any = None
    region: Any = None


class MemorySizeAndTimeout(PayloadModel):
    memory_size: Number = Field(alias="memorySize")
    timeout: Number


class FunctionsInfo(PayloadModel):
    number_of_functions: int = Field(alias="numberOfFunctions")
    memory_size_and_timeout_per_function: Tuple[MemorySizeAndTimeout, ...] = Field(
        default=(), alias="memorySizeAndTimeoutPerFunction"
    )


class EventCount(PayloadModel):
    name: str
    count: int


class EventsInfo(PayloadModel):
    number_of_events: int = Field(alias="numberOfEvents")
    number_of_events_per_type: Tuple[EventCount, ...] = Field(default=(), alias="numberOfEventsPerType")
    event_names_per_function: Tuple[Tuple[str, ...], ...] = Field(default=(), alias="eventNamesPerFunction")


class GeneralInfo(PayloadModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    context: str
    timestamp: int
    timezone: str
    operating_system: str = Field(alias="operatingSystem")
    user_agent: str = Field(alias="userAgent")
    serverless_version: str = Field(alias="serverlessVersion")
    node_js_version: str = Field(alias="nodeJsVersion")
    is_docker_container: bool = Field(alias="isDockerContainer")
    is_ci_system: bool = Field(alias="isCISystem")
    ci_system: Optional[str] = Field(default=None, alias="ciSystem")
    platform_id: Optional[str] = Field(default=None, alias="platformId")


class AwsInfo(PayloadModel):
    has_iam_authorizer: bool = Field(alias="hasIAMAuthorizer")
    has_custom_authorizer: bool = Field(alias="hasCustomAuthorizer")
    has_cognito_authorizer: bool = Field(alias="hasCognitoAuthorizer")


class StatProperties(PayloadModel):
    version: int = PAYLOAD_VERSION
    command: CommandInfo
    service: ServiceInfo
    provider: ProviderInfo
    functions: FunctionsInfo
    events: EventsInfo
    general: GeneralInfo
    aws: Optional[AwsInfo] = None


class TelemetryPayload(PayloadModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    event: str = STAT_EVENT
    properties: StatProperties

    def to_dict(self) -> Dict[str, Any]:
        """Formato de envio: chaves camelCase, sem platformId/aws quando ausentes"""
        data = self.model_dump(mode="json", by_alias=True)
        properties = data["properties"]

        if properties["general"].get("platformId") is None:
            properties["general"].pop("platformId", None)
        if properties.get("aws") is None:
            properties.pop("aws", None)

        return data
