# src/agent_template/api/routes/agents.py
from fastapi import APIRouter, Query, status
from fastapi.responses import StreamingResponse

from agent_template.api.dependencies import (
    CreateAgentDep,
    GetAgentDep,
    ListAgentsDep,
    RunAgentDep,
)
from agent_template.api.presenters import AgentPresenter
from agent_template.api.schemas.agents import (
    AgentExecutionResponse,
    AgentListResponse,
    AgentResponse,
    CreateAgentRequest,
    PingResponse,
    RunAgentRequest,
)
from agent_template.api.schemas.errors import ErrorResponse
from agent_template.domain.models import AgentConfig, LLMModelConfig
from agent_template.infrastructure.graphs.streaming import format_sse

router = APIRouter(prefix="/agents", tags=["Agents"])


def _to_config(body: CreateAgentRequest) -> AgentConfig:
    return AgentConfig(
        type=body.type,
        name=body.name,
        description=body.description,
        llm_config=LLMModelConfig(
            provider=body.llm_provider,
            model_name=body.llm_model,
            temperature=body.temperature,
            max_tokens=body.max_tokens,
        ),
        max_iterations=body.max_iterations,
        timeout_ms=body.timeout_ms,
        system_prompt=body.system_prompt,
        enable_memory=body.enable_memory,
        enable_streaming=body.enable_streaming,
        tools=body.tools,
        metadata=body.metadata,
    )


@router.post(
    "",
    response_model=AgentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create agent",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid agent configuration or duplicate name"},
    },
)
async def create_agent(body: CreateAgentRequest, use_case: CreateAgentDep):
    agent = await use_case.execute(_to_config(body))
    return AgentPresenter.to_response(agent)


@router.get(
    "",
    response_model=AgentListResponse,
    summary="List agents",
)
async def list_agents(
    use_case: ListAgentsDep,
    skip: int = Query(0, ge=0, description="Number of agents to skip"),
    take: int = Query(10, ge=1, le=100, description="Maximum number of agents to return"),
):
    page = await use_case.execute(skip=skip, take=take)
    return AgentPresenter.to_list_response(page)


# Declared before /{agent_id} so "health" is not taken as an ID.
@router.get(
    "/health/ping",
    response_model=PingResponse,
    summary="Agents API liveness check",
)
async def ping():
    return PingResponse()


@router.get(
    "/{agent_id}",
    response_model=AgentResponse,
    summary="Get agent",
    responses={404: {"model": ErrorResponse, "description": "Agent not found"}},
)
async def get_agent(agent_id: str, use_case: GetAgentDep):
    agent = await use_case.execute(agent_id)
    return AgentPresenter.to_response(agent)


@router.post(
    "/{agent_id}/run",
    response_model=AgentExecutionResponse,
    summary="Run agent",
    description="""
    Run one turn of the agent and wait for the result.

    Pass the `session_id` of a previous run to continue that conversation
    (agents with `enable_memory` keep their session active).
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Agent inactive or session not usable"},
        404: {"model": ErrorResponse, "description": "Agent or session not found"},
        502: {"model": ErrorResponse, "description": "LLM provider error"},
        504: {"model": ErrorResponse, "description": "Agent run timed out"},
    },
)
async def run_agent(agent_id: str, body: RunAgentRequest, use_case: RunAgentDep):
    result = await use_case.execute(agent_id, body.query, session_id=body.session_id)
    return AgentPresenter.to_execution_response(result)


@router.post(
    "/{agent_id}/stream",
    summary="Run agent with streaming response",
    description="""
    Run the agent and stream Server-Sent Events.

    The first event carries the `session_id`; then `start`, one
    `node_update` per graph step and finally `end` or `error`:
    ```
    data: {"type": "node_update", "node_id": "agent", "data": {...}}
    ```
    """,
    responses={
        200: {
            "description": "Streaming response started",
            "content": {"text/event-stream": {}},
        },
        400: {"model": ErrorResponse, "description": "Streaming not enabled for this agent"},
        404: {"model": ErrorResponse, "description": "Agent not found"},
    },
)
async def stream_agent(agent_id: str, body: RunAgentRequest, use_case: RunAgentDep):
    events = await use_case.stream(agent_id, body.query, session_id=body.session_id)

    async def generate():
        async for event in events:
            yield format_sse(event)

    return StreamingResponse(generate(), media_type="text/event-stream")
