"""agentctx CLI layer."""
