import logging
from huggingface_hub import hf_hub_download
from llama_cpp import Llama
from tenacity import Retrying, stop_after_attempt, wait_exponential
from .config import InferenceConfig


class ModelLoader:
    def __init__(self, config: InferenceConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def resolve_path(self) -> str:
        if self.config.local_model_path:
            self.logger.info("Using local model file %s", self.config.local_model_path)
            return self.config.local_model_path

        self.logger.info(
            "Fetching %s from %s", self.config.filename, self.config.repo_id
        )

        # only the download is retried, never inference
        for attempt in Retrying(
                stop=stop_after_attempt(self.config.download_attempts),
                wait=wait_exponential(multiplier=1, min=2, max=10),
                reraise=True
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    self.logger.warning(
                        "Retrying model download (attempt %d)",
                        attempt.retry_state.attempt_number
                    )
                return hf_hub_download(
                    repo_id=self.config.repo_id,
                    filename=self.config.filename
                )

    def load(self) -> Llama:
        model_path = self.resolve_path()

        try:
            llm = Llama(
                model_path=model_path,
                n_gpu_layers=self.config.n_gpu_layers,
                n_ctx=self.config.n_ctx,
                verbose=False
            )
        except Exception as e:
            self.logger.error("Could not open %s: %s", model_path, e)
            raise

        self.logger.info(
            "✅ Model ready (n_ctx=%d, gpu layers=%d)",
            self.config.n_ctx,
            self.config.n_gpu_layers
        )
        return llm
