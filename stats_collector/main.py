"""
Ponto de entrada do Stats Collector
Configura logging, carrega o serviço e dispara a coleta de estatísticas
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional
import structlog
import yaml

from . import __version__
from .assembler import Invocation, TelemetryAssembler
from .config import ConfigManager, config_manager
from .service import ServiceConfig, find_service_path, load_service_file
from .sink import InMemorySink, TrackingSink


def configure_logging(level: str = "INFO", log_format: str = "json"):
    """Configura logging estruturado"""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=getattr(logging, level, logging.INFO))

    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger(__name__)


def parse_options(pairs: List[str]) -> Dict[str, Any]:
    """Converte KEY=VALUE em dicionário; KEY sozinho vale True"""
    options: Dict[str, Any] = {}
    for pair in pairs:
        key, separator, raw_value = pair.partition("=")
        if not separator:
            options[key] = True
            continue

        # Valores escalares seguem a tipagem YAML (true, 3, ...)
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        options[key] = raw_value if isinstance(value, (dict, list)) else value

    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stats-collector",
        description="Coleta estatísticas anônimas de uso de um serviço"
    )
    parser.add_argument("service_dir", nargs="?", help="Diretório do serviço (padrão: diretório atual)")
    parser.add_argument("--context", help="Contexto da execução (padrão: usage)")
    parser.add_argument(
        "--option", action="append", default=[], metavar="KEY=VALUE",
        help="Opção do comando (repetível); só help, disable e enable são enviadas"
    )
    parser.add_argument("--framework-version", help="Versão do framework que disparou a coleta")
    parser.add_argument("--command", nargs="*", default=[], help="Comando do CLI que disparou a coleta")
    parser.add_argument("--config", help="Arquivo YAML de configuração")
    parser.add_argument("--dry-run", action="store_true", help="Imprime o payload sem enviar")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Função principal"""
    args = build_parser().parse_args(argv)
    manager = ConfigManager(args.config) if args.config else config_manager
    settings = manager.settings

    configure_logging(settings.log_level, settings.log_format)

    service_path = find_service_path(args.service_dir)
    if service_path is None:
        logger.error("Nenhum arquivo de serviço encontrado", directory=args.service_dir or ".")
        return 1

    try:
        service = ServiceConfig.from_dict(load_service_file(service_path))
    except (OSError, ValueError) as e:
        logger.error("Erro ao carregar serviço", error=str(e), service_path=service_path)
        return 1

    if args.dry_run:
        sink = InMemorySink()
    else:
        sink = TrackingSink(
            settings.tracking_url,
            timeout=settings.tracking_timeout,
            max_attempts=settings.tracking_max_attempts
        )

    assembler = TelemetryAssembler(settings, manager.create_gate(), sink)
    invocation = Invocation(
        commands=tuple(args.command),
        options=parse_options(args.option),
        service_path=service_path,
        framework_version=args.framework_version
    )

    try:
        payload = await assembler.log_stat(service, invocation, args.context)
        await assembler.drain()
    finally:
        await sink.close()

    if payload is None:
        logger.info("Tracking desabilitado, nada enviado")
    elif args.dry_run:
        print(json.dumps(payload.to_dict(), indent=2))

    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
