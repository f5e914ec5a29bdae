"""Demo script for the Director.

Uses whichever completion provider has credentials in .env (ANTHROPIC_API_KEY,
OPENAI_API_KEY/API_KEY with MODEL_NAME and MODEL_URL, or GEMINI_API_KEY).

Edit the constants below to configure the caller.

Usage:
    poetry run python examples/director_demo/director_demo.py
    poetry run python examples/director_demo/director_demo.py --message "@research tell me about Acme Corp"
"""

import argparse
import os

from dotenv import load_dotenv

from director import CallerContext, Director, DirectorConfig, DirectorRequest
from director.agents.types import ActivitySnapshot, ActivityStats, LeadSummary
from director.factory import DefaultLLMFactory
from director.integrations import is_observability_enabled

# Configuration - edit these values directly
USER_ROLE = "sdr"
USER_NAME = "Dana"
PLAN_TIMEOUT_S = 300.0

env_path = os.path.join(os.path.dirname(__file__), ".env")
load_dotenv(env_path)


def get_caller() -> CallerContext:
    """Caller with a small activity snapshot so step 1 has something to work with."""
    return CallerContext(
        id=1,
        role=USER_ROLE,
        name=USER_NAME,
        activity_snapshot=ActivitySnapshot(
            leads=[
                LeadSummary(id=1, company_name="Acme Corp", contact_name="Pat Lee", status="qualified", fit_score=82),
                LeadSummary(id=2, company_name="Globex", contact_name="Sam Ortiz", status="contacted", fit_score=64),
            ],
            stats=ActivityStats(calls_this_week=41, leads_contacted=18, qualified_leads=4, connection_rate=12.5),
        ),
    )


def main():
    """Run one request through the Director, streaming each node."""
    parser = argparse.ArgumentParser(description="Run the Director against a live completion provider")
    parser.add_argument(
        "--message",
        type=str,
        default="Research Acme Corp and then analyze how it fits our product line",
        help="Request to run",
    )
    args = parser.parse_args()

    print(f"Langfuse tracing: {'enabled' if is_observability_enabled() else 'disabled'}\n")
    try:
        factory = DefaultLLMFactory()
        print(f"Provider: {factory.resolve_provider()}\n")
    except ValueError as e:
        print(f"ERROR: {e}")
        return

    director = Director(llm_factory=factory, config=DirectorConfig.from_env(plan_timeout_s=PLAN_TIMEOUT_S))
    request = DirectorRequest(message=args.message, caller=get_caller())

    print(f"Message: {args.message}\n")
    print("=" * 60)
    print("Streaming execution (showing each step):\n")

    text = ""
    for update in director.stream(request):
        for node_name, node_state in update.items():
            print(f"-> Executed node: {node_name}")
            if not isinstance(node_state, dict):
                continue

            if node_name == "route":
                route = node_state["route"]
                target = route.worker_type.value if route.worker_type else "planner"
                print(f"  Route: {target} ({route.reason})")

            if node_name == "build_plan":
                plan = node_state["plan"]
                print(f"  Approach: {plan.approach.value}{' (fallback)' if plan.is_fallback else ''}")
                for step in plan.steps:
                    print(f"  {step.step_number}. [{step.worker.value}] {step.action}")

            if node_name in {"run_step", "run_parallel_step"}:
                for step in node_state.get("outcomes", {}).values():
                    print(f"  Step {step.step_number}: {step.status.value}")
                    if step.error:
                        print(f"    {step.error}")

            if node_state.get("text"):
                text = node_state["text"]

    print("\n" + "=" * 60)
    print(f"\nFinal Result:\n\n{text}")


if __name__ == "__main__":
    main()
