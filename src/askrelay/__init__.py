"""askrelay - redirect an agent's interactive questions to a Slack channel."""

__version__ = "0.1.0"
