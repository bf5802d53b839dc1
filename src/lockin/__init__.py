"""lockin: background focus agent.

Tracks time per site, keeps a redirect engine's block rules in sync with a
denylist, and runs a focus/break timer whose completion survives restarts.

Use explicit imports:
    from lockin.agent import BackgroundAgent, AgentRunner
    from lockin.config import Settings
"""

__version__ = "0.1.0"
