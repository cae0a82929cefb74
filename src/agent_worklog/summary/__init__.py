"""Work log summaries delegated to a text-generation collaborator."""

from .generator import AnthropicTextGenerator, FakeTextGenerator, TextGenerator
from .orchestrator import (
    NO_ENTRIES_MESSAGE,
    SUMMARY_ENTRY_CAP,
    SummaryOrchestrator,
    SummaryRequest,
    SummaryResult,
)

__all__ = [
    "AnthropicTextGenerator",
    "FakeTextGenerator",
    "NO_ENTRIES_MESSAGE",
    "SUMMARY_ENTRY_CAP",
    "SummaryOrchestrator",
    "SummaryRequest",
    "SummaryResult",
    "TextGenerator",
]
