import asyncio
import os
import requests
import logging
from ai.engine.capability import CapabilityState, UnavailableReason
from ai.engine.errors import InferenceFailure

logger = logging.getLogger(__name__)


class APIInference:
    """
    Inference provider for an OpenAI-compatible chat completions endpoint.

    Calls are not retried here: a failed request fails the whole
    summarize/answer operation.
    """

    def __init__(self, endpoint: str | None = None, token: str | None = None,
                 model: str | None = None, temperature: float = 0.1, timeout: int = 60):
        self.endpoint = endpoint or os.getenv("INFERENCE_API_URL")
        self.token = token or os.getenv("INFERENCE_API_TOKEN")
        self.model = model or os.getenv("INFERENCE_MODEL", "mixtral-8x7b-32768")
        self.temperature = temperature
        self.timeout = timeout

    def current_capability(self) -> CapabilityState:
        if not self.endpoint or not self.token:
            return CapabilityState.unavailable(UnavailableReason.NOT_ENABLED)
        return CapabilityState.available()

    def _request(self, payload):
        try:
            response = requests.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json"
                },
                json=payload,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("Inference API request failed: %s", e)
            raise InferenceFailure(str(e)) from e

        if not response.ok:
            logger.error("Inference API error: %s", response.text)
            raise InferenceFailure(
                f"HTTP {response.status_code}: {response.text[:500]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise InferenceFailure("Inference API returned invalid JSON") from e

    def _complete(self, system_instruction: str, user_text: str, max_tokens: int) -> str:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": max_tokens,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_text}
            ]
        }

        data = self._request(payload)

        if not isinstance(data, dict):
            logger.error("Invalid inference response: %s", data)
            raise InferenceFailure("Invalid inference API response")

        choices = data.get("choices", [])
        if not choices:
            logger.error("Empty inference response: %s", data)
            raise InferenceFailure("Inference API returned no choices")

        try:
            raw = choices[0].get("message", {}).get("content")
        except (AttributeError, TypeError, KeyError, IndexError) as e:
            logger.error("Invalid inference response: %s", data)
            raise InferenceFailure("Invalid inference API response") from e

        if not isinstance(raw, str):
            raise InferenceFailure("Inference API returned no content")

        logger.debug("RAW INFERENCE RESPONSE:\n%s", raw)
        return raw.strip()

    async def generate(
            self,
            system_instruction: str,
            user_text: str,
            max_output_tokens: int
    ) -> str:
        loop = asyncio.get_running_loop()

        def task():
            return self._complete(system_instruction, user_text, max_output_tokens)

        return await loop.run_in_executor(None, task)
