"""
Destinos de envio do evento de estatísticas
"""
from typing import Any, Dict, List, Optional
import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .payload import TelemetryPayload

logger = structlog.get_logger(__name__)


class TrackingSink:
    """Cliente HTTP para o serviço de analytics"""

    def __init__(
        self,
        url: str,
        timeout: float = 1.0,
        max_attempts: int = 1,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.url = url
        self.max_attempts = max_attempts

        # Configurar cliente HTTP
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={'Content-Type': 'application/json'}
        )

        self.stats = {
            'sent': 0,
            'failed': 0,
            'last_error': None
        }

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Fecha o cliente HTTP"""
        await self.client.aclose()

    async def emit(self, payload: TelemetryPayload) -> bool:
        """Envia o payload; falhas são registradas e nunca propagadas"""
        try:
            await self._post(payload.to_dict())
        except httpx.HTTPError as e:
            error_msg = f"Erro ao enviar estatísticas: {str(e)}"
            self.stats['failed'] += 1
            self.stats['last_error'] = error_msg
            logger.warning("Falha no envio de estatísticas", error=error_msg, url=self.url)
            return False

        self.stats['sent'] += 1
        logger.debug("Estatísticas enviadas", event=payload.event)
        return True

    async def _post(self, data: Dict[str, Any]):
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
            retry=retry_if_exception_type(httpx.HTTPError),
            reraise=True
        ):
            with attempt:
                response = await self.client.post(self.url, json=data)
                response.raise_for_status()

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()


class InMemorySink:
    """Sink em memória para testes e dry-run"""

    def __init__(self):
        self.payloads: List[TelemetryPayload] = []

    async def emit(self, payload: TelemetryPayload) -> bool:
        self.payloads.append(payload)
        return True

    async def close(self):
        pass
