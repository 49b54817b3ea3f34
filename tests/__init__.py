# tests/__init__.py
"""
Test suite for the LangGraph agent template.

- unit/domain: entities, value objects and exceptions
- unit/application: use cases against in-memory repositories
- unit/infrastructure: graphs, LLM service, tools, memory and wiring
- unit/api: routes and middleware through an ASGI client
"""
