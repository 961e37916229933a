"""identity_agent: host identity resolution for the node agent."""

AGENT_VERSION = "0.1.0"
