import asyncio
import time
import logging
import llama_cpp
from llama_cpp import Llama
from .capability import CapabilityState, UnavailableReason
from .config import InferenceConfig
from .errors import InferenceFailure
from .model_loader import ModelLoader


class LocalInference:
    """
    Inference provider backed by a llama.cpp model on this machine.

    The model is loaded lazily; until then the provider reports
    MODEL_NOT_READY.
    """

    def __init__(self, config: InferenceConfig, loader: ModelLoader | None = None):
        self.config = config
        self.loader = loader or ModelLoader(config)
        self.llm: Llama | None = None
        self.load_error: str | None = None
        self.logger = logging.getLogger(__name__)

    # -------- capability --------

    def current_capability(self) -> CapabilityState:
        if self.config.require_gpu and not llama_cpp.llama_supports_gpu_offload():
            return CapabilityState.unavailable(UnavailableReason.DEVICE_NOT_ELIGIBLE)

        if self.load_error is not None:
            return CapabilityState.other(self.load_error)

        if self.llm is None:
            return CapabilityState.unavailable(UnavailableReason.MODEL_NOT_READY)

        return CapabilityState.available()

    # -------- loading --------

    def load(self) -> None:
        if self.llm is not None:
            return

        try:
            self.llm = self.loader.load()
            self.load_error = None
        except Exception as e:
            self.load_error = str(e) or e.__class__.__name__
            raise

    async def ensure_loaded(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.load)

    # -------- generation --------

    async def generate(
            self,
            system_instruction: str,
            user_text: str,
            max_output_tokens: int
    ) -> str:
        loop = asyncio.get_running_loop()

        def task():
            return self._generate(system_instruction, user_text, max_output_tokens)

        return await loop.run_in_executor(None, task)

    def _generate(self, system_instruction: str, user_text: str, max_tokens: int) -> str:
        if self.llm is None:
            raise InferenceFailure("Model is not loaded")

        start_time = time.time()

        try:
            output = self.llm.create_chat_completion(
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_text}
                ],
                max_tokens=max_tokens,
                temperature=self.config.temperature
            )
        except Exception as e:
            self.logger.error(f"Local inference failed: {e}")
            raise InferenceFailure(str(e)) from e

        duration = time.time() - start_time
        self.logger.info(f"⚡ Inference complete in {duration:.2f}s")

        try:
            return output["choices"][0]["message"]["content"].strip()
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            self.logger.error("Invalid LLM output format")
            raise InferenceFailure("Invalid LLM output format") from e
