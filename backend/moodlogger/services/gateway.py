"""Client for the hosted LLM gateway (OpenAI-compatible chat completions).

Maps upstream failures onto a small exception taxonomy so every chat route
reports them the same way.
"""
import logging

import httpx

from moodlogger.config import Settings

logger = logging.getLogger(__name__)


class GatewayNotConfigured(RuntimeError):
    """Raised when the upstream credential is missing. Never degraded."""

    def __init__(self, message: str = "LLM_GATEWAY_API_KEY is not configured"):
        self.message = message
        super().__init__(self.message)


class GatewayError(Exception):
    """Upstream failure surfaced to callers as a generic error."""

    status_code = 500
    default_message = "AI gateway error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class GatewayRateLimited(GatewayError):
    status_code = 429
    default_message = "Rate limits exceeded, please try again later."


class GatewayPaymentRequired(GatewayError):
    status_code = 402
    default_message = "Payment required, please add funds to your AI workspace."


def error_for_status(status_code: int) -> GatewayError:
    if status_code == 429:
        return GatewayRateLimited()
    if status_code == 402:
        return GatewayPaymentRequired()
    return GatewayError()


class GatewayClient:
    """Thin async wrapper over the completions endpoint.

    One instance is owned by the application context and shares a single
    connection pool across requests.
    """

    def __init__(
        self,
        api_key: str,
        url: str,
        model: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "GatewayClient":
        api_key = settings.llm_gateway_api_key if settings.gateway_configured else ""
        return cls(
            api_key=api_key,
            url=settings.llm_gateway_url,
            model=settings.llm_model,
            timeout=settings.llm_timeout,
            transport=transport,
        )

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise GatewayNotConfigured()

    def _build_request(self, messages: list[dict], stream: bool) -> httpx.Request:
        payload = {"model": self.model, "messages": messages}
        if stream:
            payload["stream"] = True
        return self._client.build_request(
            "POST",
            self.url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    async def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code == 200:
            return
        error = error_for_status(response.status_code)
        if type(error) is GatewayError:
            body = (await response.aread()).decode("utf-8", errors="replace")
            logger.error(f"AI gateway error: status={response.status_code} body={body}")
        else:
            logger.warning(f"AI gateway refused request: status={response.status_code}")
        await response.aclose()
        raise error

    async def open_stream(self, messages: list[dict]) -> httpx.Response:
        """Start a streaming completion and return the open upstream response.

        The caller owns the response and must close it once relayed.
        """
        self.ensure_configured()
        request = self._build_request(messages, stream=True)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error(f"AI gateway transport error: {e}")
            raise GatewayError() from e

        logger.info(f"AI gateway response status: {response.status_code}")
        await self._raise_for_status(response)
        return response

    async def complete(self, messages: list[dict]) -> dict:
        """Run a non-streaming completion and return the decoded JSON body."""
        self.ensure_configured()
        request = self._build_request(messages, stream=False)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as e:
            logger.error(f"AI gateway transport error: {e}")
            raise GatewayError() from e

        await self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"AI gateway returned invalid JSON: {e}")
            raise GatewayError() from e

    async def aclose(self) -> None:
        await self._client.aclose()
