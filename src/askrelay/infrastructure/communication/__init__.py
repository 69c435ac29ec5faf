"""Chat service adapters.

- SlackChatGateway: Slack Web API binding of ChatGatewayProtocol
- ResponsePoller: waits for the answer in a question's thread
- message_builder: Block Kit payloads for questions and notices
"""

from askrelay.infrastructure.communication.response_poller import ResponsePoller
from askrelay.infrastructure.communication.slack_gateway import SlackChatGateway

__all__ = [
    "ResponsePoller",
    "SlackChatGateway",
]
