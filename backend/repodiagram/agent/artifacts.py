from pydantic import BaseModel, Field


class RepositorySnapshot(BaseModel):
    """Repository data fetched once per job and shared by every stage."""
    owner: str = Field(description="Repository owner (user or organisation)")
    repo: str = Field(description="Repository name")
    default_branch: str = Field(default="main", description="Branch the tree and links are resolved against")
    paths: list[str] = Field(default_factory=list, description="Filtered file tree, in tree order")
    readme: str = Field(default="", description="Raw README text")

    @property
    def file_tree(self) -> str:
        return "\n".join(self.paths)


class PipelineArtifact(BaseModel):
    """Intermediate and final text produced by a single pipeline run."""
    explanation: str = Field(description="Stage A output: how to draw the architecture")
    component_mapping: str = Field(description="Stage B output: `Component: path` lines")
    raw_diagram: str = Field(description="Stage C output after fence stripping, before link rewriting")
    diagram: str = Field(description="Final diagram with click events pointing at repository URLs")
