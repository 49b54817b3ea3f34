# src/agent_template/api/dependencies.py
from typing import Annotated
from fastapi import Depends, Request

from agent_template.application.use_cases import CreateAgent, GetAgent, ListAgents, RunAgent
from agent_template.container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


AppContainer = Annotated[Container, Depends(get_container)]


def get_create_agent(container: AppContainer) -> CreateAgent:
    return container.create_agent


def get_get_agent(container: AppContainer) -> GetAgent:
    return container.get_agent


def get_list_agents(container: AppContainer) -> ListAgents:
    return container.list_agents


def get_run_agent(container: AppContainer) -> RunAgent:
    return container.run_agent


# Type aliases for clean injection
CreateAgentDep = Annotated[CreateAgent, Depends(get_create_agent)]
GetAgentDep = Annotated[GetAgent, Depends(get_get_agent)]
ListAgentsDep = Annotated[ListAgents, Depends(get_list_agents)]
RunAgentDep = Annotated[RunAgent, Depends(get_run_agent)]
