"""Run the agent, reading JSON-lines commands from stdin.

Each input line is a command object such as
``{"type": "AddBlockedSite", "site": "example.com"}``; each output line is
the JSON outcome.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from lockin.agent.commands import parse_command
from lockin.agent.core import BackgroundAgent
from lockin.agent.runner import AgentRunner
from lockin.config import Settings
from lockin.exceptions import InvalidInputError

logger = logging.getLogger("lockin")


def _emit(payload: dict) -> None:
    sys.stdout.write(json.dumps(payload) + "\n")
    sys.stdout.flush()


async def serve(runner: AgentRunner) -> None:
    consumer = asyncio.create_task(runner.run())
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            line = line.strip()
            if not line:
                continue
            try:
                command = parse_command(json.loads(line))
            except (json.JSONDecodeError, InvalidInputError) as e:
                _emit({"ok": False, "error": str(e)})
                continue
            outcome = await runner.submit(command)
            _emit(outcome.to_dict())
    finally:
        await runner.stop()
        await consumer


def main(argv: list[str] | None = None) -> int:
    arg_parser = argparse.ArgumentParser(prog="lockin", description=__doc__.splitlines()[0])
    arg_parser.add_argument("--db", type=Path, help="store path (overrides LOCKIN_DB_PATH)")
    args = arg_parser.parse_args(argv)

    settings = Settings.from_env()
    if args.db:
        settings.db_path = args.db
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    agent = BackgroundAgent.from_settings(settings)
    try:
        asyncio.run(serve(AgentRunner(agent)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
