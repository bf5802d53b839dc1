"""Background agent: command dispatch and the asyncio host loop."""

from lockin.agent.commands import Command, parse_command
from lockin.agent.core import BackgroundAgent, Outcome
from lockin.agent.runner import AgentRunner

__all__ = [
    "Command",
    "parse_command",
    "BackgroundAgent",
    "Outcome",
    "AgentRunner",
]
