"""AgentMart: marketplace API for AI agent JSON configurations."""

__version__ = "0.1.0"
