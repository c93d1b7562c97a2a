"""OpenAI-backed script generation and speech synthesis over HTTP"""
import logging
from typing import Any, Dict, Optional

import httpx

from generation.clients.model_client import ProviderError, ScriptGenerationClient, SpeechSynthesisClient
from generation.prompts import SYSTEM_PROMPT, build_script_prompt

logger = logging.getLogger(__name__)

MAX_PROVIDER_MESSAGE_CHARS = 180


class _OpenAIHttpClient:
    """Shared request handling and error classification for OpenAI endpoints"""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        """POST a JSON payload; one client per call so no connection state outlives a request"""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.post(f"{self.base_url}{path}", json=payload)
        except httpx.TimeoutException as e:
            raise ProviderError("OpenAI request timed out.", failure_kind="timeout") from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"OpenAI request transport error: {_short(str(e) or type(e).__name__)}",
                failure_kind="transport",
            ) from e

        if response.is_error:
            message = _provider_message(response)
            kind = "invalid_api_key" if response.status_code == 401 else "http_error"
            raise ProviderError(
                f"OpenAI request failed with HTTP {response.status_code}: {message}",
                failure_kind=kind,
                status_code=response.status_code,
            )
        return response


class OpenAIScriptClient(_OpenAIHttpClient, ScriptGenerationClient):
    """Generates podcast scripts with the Responses API"""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_output_tokens: int = 1400,
        **kwargs,
    ):
        super().__init__(api_key, **kwargs)
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    async def generate(self, source_text: str, mode: str, origin: Optional[str]) -> str:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
            "input": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_script_prompt(source_text, mode, origin)},
            ],
        }

        response = await self._post("/responses", payload)
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("OpenAI returned a non-JSON response.", failure_kind="unknown") from e

        text = extract_output_text(data)
        logger.info("Script generated", extra={"chars": len(text)})
        return text


class OpenAISpeechClient(_OpenAIHttpClient, SpeechSynthesisClient):
    """Synthesizes MP3 narration with the speech endpoint"""

    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini-tts", **kwargs):
        super().__init__(api_key, **kwargs)
        self.model = model

    async def synthesize(self, text: str, voice_id: str) -> bytes:
        payload = {
            "model": self.model,
            "voice": voice_id,
            "input": text,
            "response_format": "mp3",
        }
        response = await self._post("/audio/speech", payload)
        audio = response.content
        if not audio:
            raise ProviderError("OpenAI speech response is empty.", failure_kind="empty_response")
        return audio


def extract_output_text(data: Dict[str, Any]) -> str:
    """Concatenate output_text parts of a Responses API payload"""
    if not isinstance(data, dict):
        return ""
    if isinstance(data.get("output_text"), str):
        return data["output_text"].strip()

    parts = []
    for item in data.get("output") or []:
        if item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if content.get("type") == "output_text" and content.get("text"):
                parts.append(content["text"])
    return "".join(parts).strip()


def _short(text: str) -> str:
    compact = " ".join(text.split())
    if len(compact) <= MAX_PROVIDER_MESSAGE_CHARS:
        return compact
    return f"{compact[:MAX_PROVIDER_MESSAGE_CHARS - 3]}..."


def _provider_message(response: httpx.Response) -> str:
    """Best-effort error message from an OpenAI error body"""
    try:
        body = response.json()
    except ValueError:
        return _short(response.text) or response.reason_phrase

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return _short(error["message"])
    return _short(response.text) or response.reason_phrase
