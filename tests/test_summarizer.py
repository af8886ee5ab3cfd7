import asyncio
import pytest
from ai.engine.capability import CapabilityState, UnavailableReason
from ai.engine.config import InferenceConfig
from ai.engine.errors import CapabilityUnavailable, InferenceFailure, MissingInput
from ai.engine.summarizer import MapReduceSummarizer


@pytest.mark.asyncio
async def test_short_content_single_call(provider):
    summarizer = MapReduceSummarizer(provider)

    result = await summarizer.summarize("A short article about gardens.")

    assert result == "reply 1"
    assert len(provider.calls) == 1

    instruction, text, max_tokens = provider.calls[0]
    assert "1-2 paragraphs" in instruction
    assert text == "A short article about gardens."
    assert max_tokens == 1000


@pytest.mark.asyncio
async def test_content_exactly_chunk_size_is_single_pass(provider):
    summarizer = MapReduceSummarizer(provider)

    await summarizer.summarize("x" * 10000)

    assert len(provider.calls) == 1
    assert "2-4 paragraphs" in provider.calls[0][0]


@pytest.mark.asyncio
async def test_long_content_map_then_reduce(provider):
    summarizer = MapReduceSummarizer(provider)
    content = "a" * 10000 + "b" * 2345

    result = await summarizer.summarize(content)

    assert len(provider.calls) == 3
    assert result == "reply 3"

    first, second, meta = provider.calls
    assert "part 1 of 2" in first[0]
    assert "part 2 of 2" in second[0]
    assert "1-2 short paragraphs" in first[0]
    assert first[1] == "a" * 10000
    assert second[1] == "b" * 2345
    assert first[2] == second[2] == 500

    # band comes from the original 12345 chars
    assert "2-4 paragraphs" in meta[0]
    assert meta[1] == "reply 1\n\nreply 2"
    assert meta[2] == 1000


@pytest.mark.asyncio
async def test_call_count_grows_with_chunks(provider):
    summarizer = MapReduceSummarizer(provider)

    await summarizer.summarize("z" * 45000)

    assert len(provider.calls) == 5 + 1
    assert "3-6 paragraphs" in provider.calls[-1][0]


@pytest.mark.asyncio
async def test_unavailable_model_makes_no_calls(make_provider):
    provider = make_provider(
        state=CapabilityState.unavailable(UnavailableReason.MODEL_NOT_READY)
    )
    summarizer = MapReduceSummarizer(provider)

    with pytest.raises(CapabilityUnavailable):
        await summarizer.summarize("x" * 30000)

    assert provider.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   \n", None])
async def test_empty_content_is_missing_input(provider, content):
    summarizer = MapReduceSummarizer(provider)

    with pytest.raises(MissingInput):
        await summarizer.summarize(content)

    assert provider.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("fail_on", [1, 2, 3, 4])
async def test_any_failure_aborts(make_provider, fail_on):
    provider = make_provider(fail_on=fail_on)
    summarizer = MapReduceSummarizer(provider)

    with pytest.raises(InferenceFailure) as exc:
        await summarizer.summarize("q" * 25000)

    assert exc.value.detail == "model crashed"
    assert len(provider.calls) == fail_on


@pytest.mark.asyncio
async def test_bounded_parallel_keeps_order(make_provider):
    provider = make_provider(reply=lambda instruction, text: text[:1])
    summarizer = MapReduceSummarizer(provider, InferenceConfig(map_concurrency=3))

    content = "a" * 10000 + "b" * 10000 + "c" * 10000 + "d" * 5

    await summarizer.summarize(content)

    assert len(provider.calls) == 5
    assert provider.calls[-1][1] == "a\n\nb\n\nc\n\nd"


class BlockingProvider:

    def __init__(self):
        self.calls = 0
        self.started = asyncio.Event()

    def current_capability(self):
        return CapabilityState.available()

    async def generate(self, system_instruction, user_text, max_output_tokens):
        self.calls += 1
        self.started.set()
        await asyncio.sleep(10)
        return "never"


@pytest.mark.asyncio
async def test_cancel_stops_further_calls():
    provider = BlockingProvider()
    summarizer = MapReduceSummarizer(provider)

    task = asyncio.create_task(summarizer.summarize("x" * 35000))
    await provider.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert provider.calls == 1


@pytest.mark.asyncio
async def test_cancel_before_first_call():
    provider = BlockingProvider()
    summarizer = MapReduceSummarizer(provider)

    task = asyncio.create_task(summarizer.summarize("x" * 35000))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert provider.calls == 0


class OneBadSectionProvider:
    """Section "b" fails while the other sections are still generating."""

    def __init__(self):
        self.calls = []
        self.cancelled = []
        self.error = InferenceFailure("section b broke")

    def current_capability(self):
        return CapabilityState.available()

    async def generate(self, system_instruction, user_text, max_output_tokens):
        self.calls.append(user_text[:1])
        if user_text.startswith("b"):
            await asyncio.sleep(0.01)
            raise self.error
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled.append(user_text[:1])
            raise
        return "never"


@pytest.mark.asyncio
async def test_bounded_parallel_failure_cancels_siblings():
    provider = OneBadSectionProvider()
    summarizer = MapReduceSummarizer(provider, InferenceConfig(map_concurrency=3))

    content = "a" * 10000 + "b" * 10000 + "c" * 10000

    with pytest.raises(InferenceFailure) as exc:
        await summarizer.summarize(content)

    assert exc.value is provider.error
    assert sorted(provider.calls) == ["a", "b", "c"]
    assert sorted(provider.cancelled) == ["a", "c"]
