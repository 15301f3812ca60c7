from pydantic import BaseModel

from repodiagram.agent.base import BaseAgent, PipelineStage
from repodiagram.agent.prompts.mapping import COMPONENT_MAPPING_SYSTEM_PROMPT


class MappingInput(BaseModel):
    explanation: str
    file_tree: str


class ComponentMappingAgent(BaseAgent[MappingInput]):
    """Stage B: map the explained components onto files and directories."""

    stage = PipelineStage.COMPONENT_MAPPING

    async def run(self, input_data: MappingInput) -> str:
        response = await self.llm.complete(
            COMPONENT_MAPPING_SYSTEM_PROMPT,
            {"explanation": input_data.explanation, "file_tree": input_data.file_tree},
        )
        return self.extract(response)
