from repodiagram.agent.artifacts import RepositorySnapshot
from repodiagram.agent.base import BaseAgent, PipelineStage
from repodiagram.agent.prompts.explanation import EXPLANATION_SYSTEM_PROMPT


class ExplanationAgent(BaseAgent[RepositorySnapshot]):
    """
    Stage A: explain how the repository's architecture should be drawn,
    from its filtered file tree and README.
    """

    stage = PipelineStage.EXPLANATION

    async def run(self, input_data: RepositorySnapshot) -> str:
        response = await self.llm.complete(
            EXPLANATION_SYSTEM_PROMPT,
            {"file_tree": input_data.file_tree, "readme": input_data.readme},
        )
        return self.extract(response)
