import logging

from repodiagram.agent.artifacts import PipelineArtifact
from repodiagram.agent.click_events import rewrite_click_events
from repodiagram.agent.diagram_agent import DiagramAgent, DiagramInput
from repodiagram.agent.explanation_agent import ExplanationAgent
from repodiagram.agent.llm_client import CompletionService, LLMClient
from repodiagram.agent.mapping_agent import ComponentMappingAgent, MappingInput
from repodiagram.agent.repo_data import RepoDataSource, fetch_snapshot

logger = logging.getLogger(__name__)


async def run_diagram_pipeline(
    owner: str,
    repo: str,
    *,
    source: RepoDataSource,
    llm: CompletionService | None = None,
    host: str | None = None,
) -> PipelineArtifact:
    """
    Fetch repository data, run the three completion stages in order and
    rewrite click events into repository URLs.

    Any failure propagates to the caller; nothing partial is returned.
    """
    completion = llm or LLMClient()

    # 1. Repository data
    snapshot = await fetch_snapshot(source, owner, repo)

    # 2. Explanation
    logger.info("Generating explanation for %s/%s", owner, repo)
    explanation = await ExplanationAgent(llm=completion).run(snapshot)

    # 3. Component mapping
    logger.info("Mapping components for %s/%s", owner, repo)
    component_mapping = await ComponentMappingAgent(llm=completion).run(
        MappingInput(explanation=explanation, file_tree=snapshot.file_tree)
    )

    # 4. Diagram
    logger.info("Rendering diagram for %s/%s", owner, repo)
    raw_diagram = await DiagramAgent(llm=completion).run(
        DiagramInput(explanation=explanation, component_mapping=component_mapping)
    )

    # 5. Post-process click events
    diagram = rewrite_click_events(
        raw_diagram, owner, repo, snapshot.default_branch, host=host
    )

    return PipelineArtifact(
        explanation=explanation,
        component_mapping=component_mapping,
        raw_diagram=raw_diagram,
        diagram=diagram,
    )
