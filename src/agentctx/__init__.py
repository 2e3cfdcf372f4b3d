"""agentctx: a single JSON snapshot of local machine context for agents."""

__version__ = "0.1.0"
