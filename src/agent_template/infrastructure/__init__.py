"""Adapters: storage, LLM clients, tools, graphs and logging."""
