from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from roastchess.config import ServerConfig
from roastchess.protocol.http.app import create_app
from roastchess.search.service import Difficulty


def parse_args(argv: Optional[List[str]] = None) -> ServerConfig:
    defaults = ServerConfig()
    parser = argparse.ArgumentParser(description="Serve the chess game API")
    parser.add_argument("--host", type=str, default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--log-level", type=str, default=defaults.log_level)
    parser.add_argument(
        "--hints", type=int, default=defaults.hint_allowance, help="Hints per side per game"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=defaults.default_difficulty.value,
        help="Default bot difficulty for new games",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed the bot's tie-breaks")
    args = parser.parse_args(argv)
    return ServerConfig(
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        hint_allowance=args.hints,
        default_difficulty=Difficulty(args.difficulty),
        seed=args.seed,
    )


def main(argv: Optional[List[str]] = None) -> None:
    config = parse_args(argv)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
