from dataclasses import dataclass
from typing import Optional

# Characters per chunk. Independent of the paragraph band.
CHUNK_SIZE = 10_000

# Map steps run one at a time to keep load on the model bounded.
SEQUENTIAL_MAP_CONCURRENCY = 1


@dataclass
class InferenceConfig:
    repo_id: str = "TheBloke/Mistral-7B-Instruct-v0.2-GGUF"
    filename: str = "mistral-7b-instruct-v0.2.Q4_K_M.gguf"

    local_model_path: Optional[str] = None

    chunk_size: int = CHUNK_SIZE
    map_concurrency: int = SEQUENTIAL_MAP_CONCURRENCY

    max_tokens_standard: int = 1000
    max_tokens_chunk: int = 500
    max_tokens_answer: int = 500
    temperature: float = 0.1

    n_ctx: int = 8192
    n_gpu_layers: int = -1
    require_gpu: bool = False

    download_attempts: int = 3
