#!/usr/bin/env python3
"""
Exemplo básico de uso do Stats Collector.

Este exemplo demonstra como:
1. Descrever um serviço a partir de um dicionário
2. Montar o evento framework_stat sem enviar nada (InMemorySink)
3. Inspecionar o payload gerado
"""

import asyncio
import json
import logging
import tempfile
from pathlib import Path

from stats_collector.assembler import Invocation, TelemetryAssembler
from stats_collector.config import ConfigGate, StatsSettings
from stats_collector.metrics import StatsMetrics
from stats_collector.service import ServiceConfig
from stats_collector.sink import InMemorySink

# Configurar logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


SAMPLE_SERVICE = {
    "service": "orders-api",
    "provider": {
        "name": "aws",
        "runtime": "nodejs8.10",
        "stage": "dev",
        "region": "sa-east-1",
        "memorySize": 512,
    },
    "plugins": ["serverless-offline"],
    "functions": {
        "create": {
            "handler": "handler.create",
            "timeout": 10,
            "events": [
                {"http": {"path": "orders", "method": "post", "authorizer": {"arn": "arn:aws:cognito-idp:sa-east-1:123:userpool/abc"}}},
            ],
        },
        "notify": {
            "handler": "handler.notify",
            "events": [{"sns": "order-created"}],
        },
    },
}


async def main():
    """Monta e imprime o payload de um serviço de exemplo."""
    with tempfile.TemporaryDirectory() as home:
        rc_path = Path(home) / ".serverlessrc"
        sink = InMemorySink()

        assembler = TelemetryAssembler(
            StatsSettings(),
            ConfigGate(str(rc_path)),
            sink,
            metrics=StatsMetrics(enabled=False),
        )

        logger.info("📊 Montando estatísticas do serviço de exemplo...")
        payload = await assembler.log_stat(
            ServiceConfig.from_dict(SAMPLE_SERVICE),
            Invocation(commands=("deploy",), options={"stage": "dev", "help": False}, service_path=home),
        )
        await assembler.drain()

        if payload is None:
            logger.warning("⚠️ Tracking desabilitado, nenhum payload gerado")
            return

        logger.info(f"✅ {len(sink.payloads)} payload(s) registrado(s) no sink em memória")
        print(json.dumps(payload.to_dict(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
