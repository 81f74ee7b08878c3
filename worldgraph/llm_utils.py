"""Completion oracle client for Ollama's native generate endpoint.

Each call returns one raw continuation. The client does not retry; a failed
call raises :class:`OracleError` and the caller decides what that means.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from worldgraph.config import Settings
from worldgraph.errors import OracleError

logger = logging.getLogger(__name__)

# Cut the model off after one line of continuation.
STOP: List[str] = ["\n", "("]

# Ollama template that passes the prompt through untouched.
VERBATIM_TEMPLATE = "{{ .Prompt }}"


def process_result(text: str) -> str:
    return text.strip()


class OllamaOracle:
    """Client for Ollama's native generate endpoint."""

    def __init__(
        self,
        base_url: str,
        model_name: str,
        temperature: float,
        timeout: float = 120.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url
        self.model_name = model_name
        self.temperature = temperature
        self.client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )

    def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "template": VERBATIM_TEMPLATE,
            "options": {
                "temperature": self.temperature,
                "stop": STOP,
            },
        }
        try:
            response = self.client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            raise OracleError(f"Request to {self.base_url} timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise OracleError(
                f"HTTP error from {self.base_url}: "
                f"{exc.response.status_code} - {exc.response.text}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise OracleError(f"Error calling Ollama at {self.base_url}: {exc}") from exc

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise OracleError(f"Malformed response from {self.base_url}: {data!r}")
        return text

    def close(self) -> None:
        self.client.close()


def build_oracle(settings: Settings) -> OllamaOracle:
    logger.info("Ollama: %s", settings.ollama_url)
    return OllamaOracle(
        settings.ollama_url,
        settings.model_name,
        settings.temperature,
        timeout=settings.timeout,
    )
