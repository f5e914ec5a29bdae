"""Command-line entry point for the Director.

Reads provider credentials and DIRECTOR_* settings from the environment (a `.env`
file in the working directory is loaded first).

Usage:
    lead-intel-director "research Acme Corp and then analyze how it fits our product line"
    lead-intel-director "@research tell me about Acme Corp" --role manager
    lead-intel-director "What's my connect rate this week?" --provider openai
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from director.agents.orchestrator import Director
from director.agents.types import CallerContext, DirectorRequest, ResponseStatus, WorkerType
from director.config import DirectorConfig
from director.errors import DirectorError
from director.factory import DefaultLLMFactory
from director.integrations import is_observability_enabled

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lead-intel-director", description="Run one request through the Director.")
    parser.add_argument("message", help="Request text (use @research, @analyst, @ux, @sage to pick a worker)")
    parser.add_argument("--worker", help="Explicit worker type, e.g. research or analysis")
    parser.add_argument("--role", default="sdr", help="Caller role (sdr, manager, admin, account_executive, ...)")
    parser.add_argument("--user-id", type=int, default=0, help="Caller id")
    parser.add_argument("--name", help="Caller display name")
    parser.add_argument("--provider", help="Completion provider: anthropic, openai or gemini")
    parser.add_argument(
        "--keyword-routing",
        action="store_true",
        help="Send keyword matches straight to a worker instead of planning",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the lead-intel-director CLI."""
    load_dotenv()
    args = _parse_args(argv)

    overrides = {"keyword_routing": True} if args.keyword_routing else {}
    try:
        config = DirectorConfig.from_env(**overrides)
        logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    except ValueError as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return 1
    logger.info("Langfuse tracing: %s", "enabled" if is_observability_enabled() else "disabled")

    try:
        explicit_worker = WorkerType.parse(args.worker) if args.worker else None
        director = Director(llm_factory=DefaultLLMFactory(provider=args.provider), config=config)
        request = DirectorRequest(
            message=args.message,
            caller=CallerContext(id=args.user_id, role=args.role, name=args.name),
            explicit_worker=explicit_worker,
        )
        response = director.run(request)
    except (DirectorError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(response.text)
    workers = ", ".join(w.value for w in response.workers_used) or "-"
    print(
        f"\n[{response.metadata.status.value}] worker={response.worker_type.value} "
        f"workers_used={workers} time={response.metadata.execution_time_ms}ms",
        file=sys.stderr,
    )
    return 2 if response.metadata.status is ResponseStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
