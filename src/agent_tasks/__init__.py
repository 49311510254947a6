"""Background task execution and task tools for LLM agents."""
