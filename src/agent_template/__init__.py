"""LangGraph agent template: layered scaffold for LLM agents."""

__version__ = "0.1.0"
