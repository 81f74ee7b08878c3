"""World Graph: cached, LLM-backed answers to "what is A + B?"."""

__version__ = "0.1.0"
