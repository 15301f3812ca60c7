import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from repodiagram.agent.llm_client import CompletionService, LLMClient

InType = TypeVar("InType")


class PipelineStage(str, Enum):
    """The three completion stages, named after the tag each one is asked to answer in."""

    EXPLANATION = "explanation"
    COMPONENT_MAPPING = "component_mapping"
    DIAGRAM = "diagram"


def extract_tagged_section(text: str, tag: str) -> str:
    """Return the trimmed body of ``<tag>...</tag>``, or ``text`` untouched when the tags are missing.

    The match is greedy: it runs from the first opening tag to the last closing tag.
    """
    match = re.search(rf"<{tag}>([\s\S]*)</{tag}>", text)
    return match.group(1).strip() if match else text


_FENCE_RE = re.compile(r"```mermaid|```")


def strip_diagram_fences(text: str) -> str:
    """Remove every ```mermaid and ``` marker wherever it appears, then trim."""
    return _FENCE_RE.sub("", text).strip()


class BaseAgent(ABC, Generic[InType]):
    """Abstract base class for every completion stage in the pipeline."""

    stage: PipelineStage

    def __init__(self, llm: CompletionService | None = None, model_name: str | None = None):
        self.llm = llm or LLMClient(model_name=model_name)

    @abstractmethod
    async def run(self, input_data: InType) -> str:
        """Run the stage on its inputs and return the extracted text."""
        pass

    def extract(self, response: str) -> str:
        """Pull this stage's section out of a raw response, tolerating non-compliant models."""
        if self.stage is PipelineStage.DIAGRAM:
            return strip_diagram_fences(response)
        return extract_tagged_section(response, self.stage.value)
