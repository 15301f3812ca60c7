from pydantic import BaseModel

from repodiagram.agent.base import BaseAgent, PipelineStage
from repodiagram.agent.prompts.diagram import DIAGRAM_SYSTEM_PROMPT


class DiagramInput(BaseModel):
    explanation: str
    component_mapping: str


class DiagramAgent(BaseAgent[DiagramInput]):
    """
    Stage C: render the Mermaid diagram. Click events still carry
    repository-relative paths at this point.
    """

    stage = PipelineStage.DIAGRAM

    async def run(self, input_data: DiagramInput) -> str:
        response = await self.llm.complete(
            DIAGRAM_SYSTEM_PROMPT,
            {
                "explanation": input_data.explanation,
                "component_mapping": input_data.component_mapping,
            },
        )
        return self.extract(response)
