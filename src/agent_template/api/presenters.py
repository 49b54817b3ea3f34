"""Turn domain objects into API response models."""

from agent_template.api.schemas.agents import (
    AgentExecutionResponse,
    AgentListResponse,
    AgentResponse,
)
from agent_template.domain.agent import Agent
from agent_template.domain.models import AgentExecutionResult, Page


class AgentPresenter:
    """Maps Agent entities and run results to response schemas."""

    @staticmethod
    def to_response(agent: Agent) -> AgentResponse:
        config = agent.config
        return AgentResponse(
            id=agent.id,
            name=agent.name,
            description=config.description,
            type=config.type,
            is_active=agent.is_active,
            llm_provider=config.llm_config.provider,
            llm_model=config.llm_config.model_name,
            max_iterations=config.max_iterations,
            timeout_ms=config.timeout_ms,
            system_prompt=config.system_prompt,
            tools=list(config.tools),
            created_at=agent.created_at,
            updated_at=agent.updated_at,
        )

    @classmethod
    def to_responses(cls, agents) -> list[AgentResponse]:
        return [cls.to_response(agent) for agent in agents]

    @classmethod
    def to_list_response(cls, page: Page) -> AgentListResponse:
        return AgentListResponse(
            items=cls.to_responses(page.items),
            total=page.total,
            skip=page.skip,
            take=page.take,
        )

    @staticmethod
    def to_execution_response(result: AgentExecutionResult) -> AgentExecutionResponse:
        return AgentExecutionResponse(
            session_id=result.session_id,
            success=result.success,
            output=result.output,
            iterations=result.iterations,
            duration_ms=result.duration_ms,
            error=result.error,
            metadata=result.metadata,
        )
