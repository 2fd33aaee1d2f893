"""
Command line entry point (`llmchess-arena`).

Subcommands:
- seed         insert the default model roster (and the tournament record)
- tick         run one gated tick against the configured database
- run          loop ticks every --interval seconds (--memory for an offline dry run with random moves)
- serve        start the Flask API
- leaderboard  print participants by rating
- start/stop/reset  tournament lifecycle
- probe        ask each roster model to identify itself through the gateway
"""
from __future__ import annotations
import argparse
import logging
import time
from typing import List, Optional

from . import llm_client
from .config import SETTINGS
from .database import make_session_factory
from .errors import OracleFailure
from .game import GameAdvancer
from .llm_oracle import LLMOracle
from .matchmaker import Matchmaker
from .memory_store import InMemoryStore
from .models import Participant, TournamentStatus
from .random_oracle import RandomOracle
from .sql_store import SQLStore
from .store import TournamentStore
from .tick_orchestrator import TickOrchestrator
from .tournament import TournamentControl

log = logging.getLogger("cli")

# Model ids are AI Gateway ids
ROSTER: List[Participant] = [
    Participant(id="openai/gpt-5.1-thinking", name="GPT-5", provider="openai"),
    Participant(id="anthropic/claude-opus-4.5", name="Claude Opus", provider="anthropic"),
    Participant(id="google/gemini-3-pro-preview", name="Gemini Pro", provider="google"),
    Participant(id="xai/grok-4-fast-reasoning", name="Grok 4", provider="xai"),
    Participant(id="deepseek/deepseek-v3", name="DeepSeek V3", provider="deepseek"),
    Participant(id="meta/llama-4-maverick", name="Llama 4", provider="meta"),
]

PROBE_PROMPT = "What model are you? Reply with just your model name/version in 10 words or less."


def build_control(store: TournamentStore, oracle=None, policy: Optional[str] = None) -> TournamentControl:
    advancer = GameAdvancer(store, oracle or LLMOracle())
    orchestrator = TickOrchestrator(store, advancer, Matchmaker(store, policy=policy))
    return TournamentControl(store, orchestrator)


def seed(store: TournamentStore, roster: List[Participant] = ROSTER) -> int:
    """Insert roster entries that are not in the store yet; returns how many were added."""
    known = {p.id for p in store.list_participants()}
    added = 0
    for p in roster:
        if p.id in known:
            continue
        store.insert_participant(p)
        added += 1
    store.get_tournament()
    return added


def _print_leaderboard(control: TournamentControl) -> None:
    for rank, p in enumerate(control.leaderboard(), start=1):
        print(f"{rank:>2}. {p.name:<14} {p.rating:>5}  W{p.wins} L{p.losses} D{p.draws}  ({p.id})")


def _run_loop(control: TournamentControl, interval_s: float, ticks: Optional[int]) -> None:
    n = 0
    while ticks is None or n < ticks:
        out = control.tick()
        n += 1
        log.info("Tick %d: %s", n, out)
        if ticks is not None and n >= ticks:
            break
        time.sleep(interval_s)


def _probe(models: List[str]) -> None:
    print("Checking model identities...\n")
    for model in models:
        try:
            text = llm_client.complete([{"role": "user", "content": PROBE_PROMPT}], model=model)
            print(f"{model}:\n  -> \"{text}\"")
        except OracleFailure as e:
            print(f"{model}: FAILED - {str(e)[:80]}")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="llmchess-arena", description="Tick-driven LLM chess tournament")
    ap.add_argument("--database-url", default=None, help="SQLAlchemy URL (defaults to DATABASE_URL / settings.yml)")
    ap.add_argument("--policy", choices=["full", "adjacent"], default=None, help="Matchmaking policy override")
    ap.add_argument("--log-level", default=None, help="Python logging level (e.g., INFO, DEBUG)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("seed", help="Insert the default model roster")
    sub.add_parser("tick", help="Run one tick (skipped unless the tournament is running)")
    run = sub.add_parser("run", help="Run ticks in a loop")
    run.add_argument("--interval", type=float, default=None, help="Seconds between ticks (default: tick interval setting)")
    run.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks")
    run.add_argument("--memory", action="store_true", help="Offline dry run: in-memory store and random moves")
    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    sub.add_parser("leaderboard", help="Print the leaderboard")
    sub.add_parser("start", help="Start the tournament")
    sub.add_parser("stop", help="Stop the tournament")
    sub.add_parser("reset", help="Delete all games and reset ratings")
    sub.add_parser("probe", help="Ask each roster model to identify itself")

    args = ap.parse_args(argv)
    level = (args.log_level or SETTINGS.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(asctime)s %(levelname)s %(message)s")

    if args.command == "probe":
        _probe([p.id for p in ROSTER])
        return 0

    if args.command == "run" and args.memory:
        store: TournamentStore = InMemoryStore(ROSTER)
        control = build_control(store, oracle=RandomOracle(), policy=args.policy)
        control.start()
    else:
        store = SQLStore(make_session_factory(args.database_url))
        control = build_control(store, policy=args.policy)

    if args.command == "seed":
        added = seed(store)
        print(f"Seeded {added} model(s); {len(store.list_participants())} in roster")
    elif args.command == "tick":
        print(control.tick())
    elif args.command == "run":
        interval = args.interval if args.interval is not None else store.get_tournament().tick_interval_s
        if store.get_tournament().status != TournamentStatus.RUNNING:
            log.warning("Tournament is stopped; ticks will be skipped until `llmchess-arena start`")
        try:
            _run_loop(control, interval, args.ticks)
        except KeyboardInterrupt:
            log.info("Interrupted")
        if args.memory:
            _print_leaderboard(control)
    elif args.command == "serve":
        from .server import create_app
        create_app(control, store).run(host=args.host, port=args.port)
    elif args.command == "leaderboard":
        _print_leaderboard(control)
    elif args.command == "start":
        print(control.start())
    elif args.command == "stop":
        print(control.stop())
    elif args.command == "reset":
        print(control.reset())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
