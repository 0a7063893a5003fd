"""
Configurações do Stats Collector
Gerencia configurações de ambiente e a configuração local do usuário (rc file)
"""
import os
import uuid
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog
import yaml

logger = structlog.get_logger(__name__)


class StatsSettings(BaseSettings):
    """Configurações principais do collector de estatísticas"""

    # Configurações de logging
    log_level: str = Field(default="INFO", description="Nível de log")
    log_format: str = Field(default="json", description="Formato do log (json ou console)")

    # Configuração local do usuário
    rc_path: str = Field(default="~/.serverlessrc", description="Caminho do arquivo rc do usuário")
    tracking_disabled: bool = Field(default=False, description="Desabilita o envio de estatísticas")

    # Configurações do destino de tracking
    tracking_url: str = Field(
        default="https://tracking.serverlessteam.com/v1/track",
        description="URL do serviço de analytics"
    )
    tracking_timeout: float = Field(default=1.0, description="Timeout do envio em segundos")
    tracking_max_attempts: int = Field(default=1, description="Tentativas de envio")

    # Configurações de ambiente
    dashboard_env_var: str = Field(
        default="SERVERLESS_DASHBOARD",
        description="Variável de ambiente que identifica execução pelo dashboard"
    )
    default_context: str = Field(default="usage", description="Contexto padrão da execução")

    # Configurações de monitoramento
    enable_metrics: bool = Field(default=True, description="Habilitar métricas Prometheus")

    model_config = SettingsConfigDict(env_prefix="STATS_", case_sensitive=False)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level deve ser um de: {valid_levels}')
        return v.upper()

    @field_validator('tracking_timeout')
    @classmethod
    def validate_tracking_timeout(cls, v):
        if v <= 0 or v > 60:
            raise ValueError('tracking_timeout deve estar entre 0 e 60 segundos')
        return v

    @field_validator('tracking_max_attempts')
    @classmethod
    def validate_tracking_max_attempts(cls, v):
        if v < 1 or v > 10:
            raise ValueError('tracking_max_attempts deve estar entre 1 e 10')
        return v


class ConfigManager:
    """Gerenciador de configurações com suporte a arquivos YAML"""

    def __init__(self, config_path: Optional[str] = None):
        self.settings = StatsSettings()

        if config_path and os.path.exists(config_path):
            self._load_config_file(config_path)

    def _load_config_file(self, config_path: str):
        """Carrega configurações de arquivo YAML"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

            for key, value in (config_data.get('stats') or {}).items():
                if hasattr(self.settings, key):
                    setattr(self.settings, key, value)
                else:
                    logger.warning("Chave de configuração desconhecida", key=key)

        except (OSError, yaml.YAMLError, AttributeError) as e:
            # Continua com configurações padrão
            logger.warning(
                "Erro ao carregar arquivo de configuração",
                path=config_path,
                error=str(e)
            )

    def create_gate(self) -> "ConfigGate":
        return ConfigGate(self.settings.rc_path, force_disabled=self.settings.tracking_disabled)


@dataclass(frozen=True)
class UserConfig:
    """Configuração persistida do usuário, lida uma vez por coleta"""

    framework_id: Optional[str] = None
    tracking_disabled: bool = False
    user_id: Optional[str] = None

    @classmethod
    def disabled(cls) -> "UserConfig":
        return cls(tracking_disabled=True)


class ConfigGate:
    """
    Porta de privacidade: lê o rc file do usuário a cada chamada.

    Falhas de leitura nunca são propagadas; nesse caso o tracking é
    considerado desabilitado.
    """

    def __init__(self, rc_path: str = "~/.serverlessrc", force_disabled: bool = False):
        self.rc_path = Path(rc_path).expanduser()
        self.force_disabled = force_disabled

    def read(self) -> UserConfig:
        """Lê a configuração atual do disco"""
        if self.force_disabled:
            return UserConfig.disabled()

        try:
            if not self.rc_path.exists():
                return self._create_config()

            data = yaml.safe_load(self.rc_path.read_text(encoding='utf-8'))
            if not isinstance(data, dict):
                logger.warning("Conteúdo inválido no rc file", path=str(self.rc_path))
                return UserConfig.disabled()

        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning("Erro ao ler rc file, tracking desabilitado", path=str(self.rc_path), error=str(e))
            return UserConfig.disabled()

        return UserConfig(
            framework_id=data.get('frameworkId'),
            tracking_disabled=bool(data.get('trackingDisabled', False)),
            user_id=data.get('userId'),
        )

    def is_tracking_disabled(self) -> bool:
        return self.read().tracking_disabled

    def current_user_id(self) -> Optional[str]:
        return self.read().framework_id

    def _create_config(self) -> UserConfig:
        """Cria o rc file com um novo frameworkId"""
        now = datetime.now().isoformat()
        data = {
            'userId': None,
            'frameworkId': str(uuid.uuid4()),
            'trackingDisabled': False,
            'meta': {
                'created_at': now,
                'updated_at': None,
            },
        }

        try:
            self.rc_path.parent.mkdir(parents=True, exist_ok=True)
            self.rc_path.write_text(json.dumps(data, indent=2), encoding='utf-8')
        except OSError as e:
            logger.warning("Erro ao criar rc file, tracking desabilitado", path=str(self.rc_path), error=str(e))
            return UserConfig.disabled()

        logger.info("rc file criado", path=str(self.rc_path))
        return UserConfig(framework_id=data['frameworkId'])


# Instância global do gerenciador de configurações
config_manager = ConfigManager(config_path=os.getenv('STATS_CONFIG_PATH'))
