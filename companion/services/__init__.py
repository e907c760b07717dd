"""External collaborators (LLM-backed services)."""
