"""Text-generation collaborators used to write work log summaries."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Protocol


class TextGenerator(Protocol):
    """Accepts a prompt and streams back text fragments in order."""

    def stream(self, prompt: str) -> Iterator[str]:
        ...


class AnthropicTextGenerator:
    """Stream completions from the Anthropic Messages API.

    The client is built on first use so that commands which never summarize do
    not need credentials.
    """

    def __init__(
        self,
        *,
        model: str,
        max_tokens: int = 2048,
        client_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._client_factory = client_factory or self._default_client_factory
        self._client: Any | None = None

    @staticmethod
    def _default_client_factory() -> Any:
        import anthropic

        return anthropic.Anthropic()

    def stream(self, prompt: str) -> Iterator[str]:
        if self._client is None:
            self._client = self._client_factory()
        with self._client.messages.stream(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=[{"role": "user", "content": prompt}],
        ) as response:
            for text in response.text_stream:
                if text:
                    yield text


class FakeTextGenerator:
    """Test double that records prompts and replays canned fragments."""

    def __init__(self, fragments: Iterable[str] | None = None, *, error: Exception | None = None) -> None:
        self._fragments = list(fragments or [])
        self._error = error
        self._prompts: list[str] = []

    def stream(self, prompt: str) -> Iterator[str]:
        self._prompts.append(prompt)
        yield from self._fragments
        if self._error is not None:
            raise self._error

    @property
    def prompts(self) -> list[str]:
        return self._prompts


__all__ = ["AnthropicTextGenerator", "FakeTextGenerator", "TextGenerator"]
