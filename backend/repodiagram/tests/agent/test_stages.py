from unittest.mock import AsyncMock, MagicMock

import pytest

from repodiagram.agent.artifacts import RepositorySnapshot
from repodiagram.agent.base import PipelineStage, extract_tagged_section, strip_diagram_fences
from repodiagram.agent.diagram_agent import DiagramAgent, DiagramInput
from repodiagram.agent.explanation_agent import ExplanationAgent
from repodiagram.agent.mapping_agent import ComponentMappingAgent, MappingInput
from repodiagram.errors import CompletionError

DIAGRAM = 'flowchart TD\n  A["Api"] --> B["Db"]\n  click A "src/api"'


def _llm(response: str) -> MagicMock:
    llm = MagicMock()
    llm.complete = AsyncMock(return_value=response)
    return llm


def test_extract_tagged_section_returns_trimmed_body():
    text = "Sure!\n<explanation>\n  Draw the API first.\n</explanation>\nBye"
    assert extract_tagged_section(text, "explanation") == "Draw the API first."


def test_missing_tags_fall_back_to_raw_response():
    text = "The model ignored the format entirely."
    assert extract_tagged_section(text, "component_mapping") == text


@pytest.mark.parametrize(
    "wrapped",
    [
        f"```mermaid\n{DIAGRAM}\n```",
        f"```\n{DIAGRAM}\n```",
        f"  ```mermaid\n{DIAGRAM}```  ",
        DIAGRAM,
    ],
)
def test_fence_stripping_matches_unwrapped_diagram(wrapped):
    assert strip_diagram_fences(wrapped) == DIAGRAM


@pytest.mark.asyncio
async def test_explanation_agent_sends_tree_and_readme():
    llm = _llm("<explanation>layers</explanation>")
    snapshot = RepositorySnapshot(owner="o", repo="r", paths=["src/a.py", "README.md"], readme="# R")

    result = await ExplanationAgent(llm=llm).run(snapshot)

    assert result == "layers"
    system_prompt, data = llm.complete.call_args.args
    assert "<explanation>" in system_prompt
    assert data == {"file_tree": "src/a.py\nREADME.md", "readme": "# R"}


@pytest.mark.asyncio
async def test_mapping_agent_falls_back_without_tags():
    llm = _llm("1. Api: src/api")

    result = await ComponentMappingAgent(llm=llm).run(
        MappingInput(explanation="layers", file_tree="src/api")
    )

    assert result == "1. Api: src/api"
    assert ComponentMappingAgent.stage is PipelineStage.COMPONENT_MAPPING
    _, data = llm.complete.call_args.args
    assert list(data) == ["explanation", "file_tree"]


@pytest.mark.asyncio
async def test_diagram_agent_strips_fences():
    llm = _llm(f"```mermaid\n{DIAGRAM}\n```")

    result = await DiagramAgent(llm=llm).run(
        DiagramInput(explanation="layers", component_mapping="1. Api: src/api")
    )

    assert result == DIAGRAM
    _, data = llm.complete.call_args.args
    assert data == {"explanation": "layers", "component_mapping": "1. Api: src/api"}


@pytest.mark.asyncio
async def test_stage_failure_propagates():
    llm = MagicMock()
    llm.complete = AsyncMock(side_effect=CompletionError("AI API error: 500", status_code=500))

    with pytest.raises(CompletionError):
        await ExplanationAgent(llm=llm).run(RepositorySnapshot(owner="o", repo="r"))
