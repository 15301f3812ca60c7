from typing import Annotated

from fastapi import Depends, Request

from repodiagram.services.coordinator import JobCoordinator


def get_coordinator(request: Request) -> JobCoordinator:
    return request.app.state.coordinator


CoordinatorDep = Annotated[JobCoordinator, Depends(get_coordinator)]
