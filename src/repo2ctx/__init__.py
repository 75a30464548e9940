"""repo2ctx - budgeted LLM context documents from source repositories."""

__version__ = "0.1.0"
