from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.settings import Settings
from interview.core.store import Message
from interview.errors import UpstreamError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionOptions:
    temperature: float
    max_tokens: int


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamError(
            f"Error with OpenAI API: malformed response ({exc!r})"
        ) from exc
    if not isinstance(content, str):
        raise UpstreamError("Error with OpenAI API: response has no message content")
    return content


class CompletionClient:
    """Sends interview transcripts to a chat-completion endpoint."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        settings.validate()
        self._model = settings.openai_model
        self._endpoint = settings.openai_base_url.rstrip("/") + "/chat/completions"
        self._headers = {"Authorization": f"Bearer {settings.openai_api_key}"}
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=settings.openai_timeout)

    def __enter__(self) -> "CompletionClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def complete(self, transcript: Sequence[Message], options: CompletionOptions) -> str:
        messages: List[Dict[str, str]] = [
            {"role": m.role, "content": m.content} for m in transcript
        ]
        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        logger.info(
            "Completion request: model=%s messages=%s max_tokens=%s",
            self._model,
            len(messages),
            options.max_tokens,
        )

        try:
            response = self._http.post(self._endpoint, json=payload, headers=self._headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Error with OpenAI API: Request failed with status code {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Error with OpenAI API: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"Error with OpenAI API: invalid JSON body ({exc})") from exc

        return _extract_content(data)
