import asyncio
import time
import aiohttp

from .core.enums import Metric
from .core.exceptions import ProbeTransportError
from .core.models import Reading
from .utils.logger import LoggerSetup
from .utils.time import elapsed_ms


class EndpointProber:
    """
    Issues HTTP GET requests against an application endpoint.

    Any response, whatever its status, becomes a reading carrying the status
    code. Transport failures (connection refused, DNS failure, timeout) become
    a reading without a value whose ``cause`` holds a ProbeTransportError;
    they never propagate past probe(). No retries are made here.
    """

    def __init__(self, session: aiohttp.ClientSession | None = None):
        self._session = session
        self._owns_session = session is None
        self.logger = LoggerSetup.setup(__class__.__name__)

    async def __aenter__(self) -> 'EndpointProber':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.cleanup()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def probe(self, url: str, timeout: float) -> Reading:
        """
        Probe an endpoint once.

        Args:
            url: Endpoint to request
            timeout: Total time allowed for connecting and reading the response, in seconds

        Returns:
            Reading: EndpointStatus reading with the HTTP status code, or with
                no value and a ProbeTransportError cause
        """
        if timeout <= 0:
            raise ValueError("Probe timeout must be positive")

        started = time.monotonic()
        try:
            session = await self._get_session()
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout),
                allow_redirects=True
            ) as response:
                latency = elapsed_ms(started)
                self.logger.debug(f"GET {url} -> {response.status} in {latency:.1f}ms")
                return Reading(
                    metric=Metric.ENDPOINT_STATUS,
                    value=response.status,
                    details={'url': url, 'latency_ms': round(latency, 2)}
                )

        except asyncio.TimeoutError as e:
            error = ProbeTransportError(url, f"timed out after {timeout:g}s", e)
        except aiohttp.InvalidURL as e:
            error = ProbeTransportError(url, f"invalid URL: {e}", e)
        except aiohttp.ClientConnectorError as e:
            error = ProbeTransportError(url, f"connection failed: {e.os_error or e}", e)
        except aiohttp.ClientError as e:
            error = ProbeTransportError(url, f"{e.__class__.__name__}: {e}", e)

        self.logger.warning(f"Probe of {url} failed: {error.cause}")
        return Reading(
            metric=Metric.ENDPOINT_STATUS,
            value=None,
            cause=error,
            details={'url': url, 'latency_ms': round(elapsed_ms(started), 2)}
        )

    async def cleanup(self) -> None:
        """Close the session if this prober created it"""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None
