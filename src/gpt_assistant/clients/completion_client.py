"""OpenAI-style completion API wrapper with async support."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from gpt_assistant.clients.http_client import build_async_client
from gpt_assistant.config import APIConfig

logger = logging.getLogger(__name__)

EDITS_PATH = "edits"
CHAT_PATH = "chat/completions"


class CompletionError(Exception):
    """Base class for every failure of a completion call."""


class MissingCredentialError(CompletionError):
    def __init__(self) -> None:
        super().__init__("API key not configured")


class NoCompletionError(CompletionError):
    def __init__(self) -> None:
        super().__init__("No completion generated")


class CompletionRequestError(CompletionError):
    """Transport or HTTP status failure; the message is the underlying error."""


def _token_count(value: object) -> int:
    # null or malformed usage counts as zero
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value


@dataclass
class CompletionResult:
    """First choice of a completion response, trimmed, with usage metadata."""

    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class CompletionClient:
    """Async client for the edit-style and chat-style completion endpoints."""

    def __init__(
        self,
        config: APIConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or APIConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def __aenter__(self) -> CompletionClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self.config, transport=self._transport)
        return self._client

    def _auth_headers(self) -> dict[str, str]:
        api_key = self.config.api_key.strip()
        if not api_key:
            raise MissingCredentialError()
        return {"Authorization": f"Bearer {api_key}"}

    async def _post(self, path: str, payload: dict, headers: dict[str, str]) -> object:
        """POST ``payload`` and return the decoded JSON body.

        ``config.timeout`` bounds the whole request. httpx applies its own
        timeout to each phase (connect, write, read, pool) separately.
        """
        logger.debug("POST %s model=%s", path, payload.get("model"))
        try:
            response = await asyncio.wait_for(
                self._http().post(path, json=payload, headers=headers),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            return response.json()
        except asyncio.TimeoutError as e:
            logger.error("Completion request timed out after %ss", self.config.timeout)
            raise CompletionRequestError(
                f"Request timed out after {self.config.timeout} seconds"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Completion request failed: %s", e)
            raise CompletionRequestError(str(e)) from e
        except ValueError as e:
            logger.error("Completion response is not valid JSON: %s", e)
            raise CompletionRequestError(f"Invalid response body: {e}") from e

    def _to_result(self, data: object, model: str) -> CompletionResult:
        if not isinstance(data, dict):
            raise CompletionRequestError(f"Unexpected response body: {type(data).__name__}")

        choices = data.get("choices")
        if not choices:
            raise NoCompletionError()
        if not isinstance(choices, list):
            raise CompletionRequestError(f"Unexpected 'choices' in response: {type(choices).__name__}")

        first = choices[0]
        if not isinstance(first, dict):
            raise CompletionRequestError(f"Unexpected choice in response: {type(first).__name__}")
        text = first.get("text")
        if text is None:
            message = first.get("message")
            text = message.get("content") if isinstance(message, dict) else None
        if text is None:
            raise NoCompletionError()
        if not isinstance(text, str):
            raise CompletionRequestError(f"Completion text is not a string: {type(text).__name__}")

        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        response_model = data.get("model")
        result = CompletionResult(
            text=text.strip(),
            model=response_model if isinstance(response_model, str) and response_model else model,
            input_tokens=_token_count(usage.get("prompt_tokens")),
            output_tokens=_token_count(usage.get("completion_tokens")),
        )
        self._token_log.append((result.model, result.input_tokens, result.output_tokens))
        logger.debug(
            "Completion: %d input, %d output tokens", result.input_tokens, result.output_tokens
        )
        return result

    def _chat_payload(self, system: str, prompt: str) -> dict:
        return {
            "model": self.config.chat_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }

    async def generate_edit(self, input_text: str, instruction: str) -> CompletionResult:
        """Ask the model to rewrite ``input_text`` following ``instruction``.

        Uses the edits endpoint, or the chat endpoint with the instruction as
        system message when ``edit_schema`` is ``"chat"``.

        Raises:
            MissingCredentialError: no API key; raised before any request is built.
            NoCompletionError: the response carried no choices.
            CompletionRequestError: network failure, timeout, non-2xx status
                or a body that is not a completion response.
        """
        headers = self._auth_headers()
        if self.config.edit_schema == "chat":
            payload = self._chat_payload(instruction, input_text)
            data = await self._post(CHAT_PATH, payload, headers)
            return self._to_result(data, self.config.chat_model)

        payload = {
            "model": self.config.edit_model,
            "input": input_text,
            "instruction": instruction,
        }
        data = await self._post(EDITS_PATH, payload, headers)
        return self._to_result(data, self.config.edit_model)

    async def generate_completion(self, prompt: str) -> CompletionResult:
        """Send ``prompt`` to the chat endpoint and return the assistant reply."""
        headers = self._auth_headers()
        payload = self._chat_payload(self.config.system_prompt, prompt)
        data = await self._post(CHAT_PATH, payload, headers)
        return self._to_result(data, self.config.chat_model)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
