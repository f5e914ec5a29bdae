"""Tests for the Plan Builder."""

import json
from unittest.mock import MagicMock

import pytest

from conftest import planner_llm
from director.agents.orchestrator.planner import (
    Plan,
    PlanApproach,
    StepStatus,
    build_plan,
    build_planning_prompt,
    extract_json_object,
    fallback_plan,
    parse_plan,
)
from director.agents.orchestrator.router import route_by_keyword
from director.agents.types import CallerContext, WorkerType
from director.errors import CompletionServiceError, PlanValidationError

SEQUENTIAL_PLAN = {
    "task": "Research Acme Corp and assess product fit",
    "approach": "sequential",
    "steps": [
        {"step_number": 1, "worker": "research", "action": "Research Acme Corp", "depends_on": []},
        {"step_number": 2, "worker": "analysis", "action": "Analyze fit with our product line", "depends_on": [1]},
    ],
    "requires_approval": False,
    "approval_reason": None,
}


class TestExtractJsonObject:
    """Tests for JSON extraction from free text."""

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_json_with_surrounding_prose(self):
        text = 'Here is the plan:\n{"task": "x", "steps": []}\nLet me know!'
        assert extract_json_object(text) == {"task": "x", "steps": []}

    def test_code_fence(self):
        text = 'Sure.\n```json\n{"task": "fenced"}\n```'
        assert extract_json_object(text) == {"task": "fenced"}

    def test_skips_malformed_braces(self):
        text = 'Use {placeholders} like this: {"task": "real"}'
        assert extract_json_object(text) == {"task": "real"}

    @pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{not: valid}"])
    def test_raises_when_no_object(self, text):
        with pytest.raises(PlanValidationError):
            extract_json_object(text)


class TestParsePlan:
    """Tests for validation and normalization of planner output."""

    def test_sequential_plan(self):
        plan = parse_plan(json.dumps(SEQUENTIAL_PLAN), "msg")

        assert plan.approach is PlanApproach.SEQUENTIAL
        assert [s.worker for s in plan.steps] == [WorkerType.RESEARCH, WorkerType.ANALYSIS]
        assert plan.steps[1].depends_on == (1,)
        assert plan.workers == (WorkerType.RESEARCH, WorkerType.ANALYSIS)
        assert all(s.status is StepStatus.PENDING for s in plan.steps)
        assert plan.is_fallback is False

    def test_accepts_camel_case_and_legacy_worker_names(self):
        raw = {
            "task": "t",
            "approach": "sequential",
            "agents": ["researcher", "business-analyst"],
            "steps": [
                {"stepNumber": 1, "agent": "researcher", "action": "A"},
                {"stepNumber": 2, "agent": "business-analyst", "action": "B", "dependsOn": [1]},
            ],
            "requiresApproval": True,
            "approvalReason": "Writes to the CRM",
        }
        plan = parse_plan(json.dumps(raw), "msg")

        assert [s.worker for s in plan.steps] == [WorkerType.RESEARCH, WorkerType.ANALYSIS]
        assert plan.steps[1].depends_on == (1,)
        assert plan.requires_approval is True
        assert plan.approval_reason == "Writes to the CRM"

    def test_renumbers_out_of_order_steps(self):
        raw = {
            "task": "t",
            "approach": "sequential",
            "steps": [
                {"step_number": 7, "worker": "research", "action": "A"},
                {"step_number": 3, "worker": "analysis", "action": "B", "depends_on": [7]},
                {"step_number": 10, "worker": "experience-review", "action": "C", "depends_on": [3, 7]},
            ],
        }
        plan = parse_plan(json.dumps(raw), "msg")

        assert [s.step_number for s in plan.steps] == [1, 2, 3]
        assert plan.steps[1].depends_on == (1,)
        assert plan.steps[2].depends_on == (2, 1)

    def test_missing_step_numbers_use_position(self):
        raw = {"approach": "sequential", "steps": [{"worker": "research", "action": "A"}, {"worker": "analysis", "action": "B"}]}
        plan = parse_plan(json.dumps(raw), "the request")

        assert [s.step_number for s in plan.steps] == [1, 2]
        assert plan.steps[1].depends_on == ()
        assert plan.task == "the request"

    def test_single_step_plan_is_single_without_dependencies(self):
        raw = {"approach": "sequential", "steps": [{"worker": "analysis", "action": "A", "depends_on": []}]}
        plan = parse_plan(json.dumps(raw), "msg")

        assert plan.approach is PlanApproach.SINGLE
        assert len(plan.steps) == 1
        assert plan.steps[0].depends_on == ()

    def test_single_with_many_steps_becomes_sequential(self):
        raw = {"approach": "single", "steps": [{"worker": "research", "action": "A"}, {"worker": "analysis", "action": "B"}]}
        assert parse_plan(json.dumps(raw), "msg").approach is PlanApproach.SEQUENTIAL

    def test_parallel_with_dependencies_becomes_sequential(self):
        raw = {
            "approach": "parallel",
            "steps": [{"worker": "research", "action": "A"}, {"worker": "analysis", "action": "B", "depends_on": [1]}],
        }
        assert parse_plan(json.dumps(raw), "msg").approach is PlanApproach.SEQUENTIAL

    def test_parallel_without_dependencies_stays_parallel(self):
        raw = {"approach": "PARALLEL", "steps": [{"worker": "research", "action": "A"}, {"worker": "ux", "action": "B"}]}
        assert parse_plan(json.dumps(raw), "msg").approach is PlanApproach.PARALLEL

    def test_truncates_to_max_steps(self):
        raw = {"approach": "parallel", "steps": [{"worker": "research", "action": f"A{i}"} for i in range(10)]}
        plan = parse_plan(json.dumps(raw), "msg", max_steps=3)

        assert len(plan.steps) == 3
        assert plan.workers == (WorkerType.RESEARCH,)

    def test_approval_reason_dropped_without_approval(self):
        raw = {"steps": [{"worker": "research", "action": "A"}], "requires_approval": False, "approval_reason": "x"}
        assert parse_plan(json.dumps(raw), "msg").approval_reason is None

    @pytest.mark.parametrize(
        "raw",
        [
            {"task": "t", "approach": "single", "steps": []},
            {"task": "t"},
            {"steps": [{"worker": "wizard", "action": "A"}]},
            {"steps": [{"worker": "orchestrator", "action": "A"}]},
            {"steps": [{"worker": "research", "action": "   "}]},
            {"steps": [{"worker": "research"}]},
            {"approach": "sometimes", "steps": [{"worker": "research", "action": "A"}]},
            {"steps": [{"step_number": 1, "worker": "research", "action": "A"}, {"step_number": 1, "worker": "analysis", "action": "B"}]},
            {"steps": [{"step_number": 0, "worker": "research", "action": "A"}]},
            {
                "steps": [
                    {"worker": "research", "action": "A"},
                    {"step_number": 1, "worker": "analysis", "action": "B"},
                    {"worker": "experience-review", "action": "C", "depends_on": [1]},
                ]
            },
            {"steps": [{"worker": "research", "action": "A", "depends_on": [2]}, {"worker": "analysis", "action": "B"}]},
            {"steps": [{"worker": "research", "action": "A"}, {"worker": "analysis", "action": "B", "depends_on": [9]}]},
        ],
    )
    def test_invalid_structures_raise(self, raw):
        with pytest.raises(PlanValidationError):
            parse_plan(json.dumps(raw), "msg")


class TestFallbackPlan:
    """Tests for the deterministic fallback plan."""

    def test_single_step_keyword_routed(self):
        plan = fallback_plan("What's my connect rate this week?")

        assert plan.approach is PlanApproach.SINGLE
        assert plan.is_fallback is True
        assert len(plan.steps) == 1
        step = plan.steps[0]
        assert step.worker is WorkerType.ANALYSIS
        assert step.action == "What's my connect rate this week?"
        assert step.depends_on == ()
        assert plan.requires_approval is False


class TestBuildPlan:
    """Tests for the full Plan Builder."""

    def test_makes_exactly_one_planner_call(self):
        llm = planner_llm(SEQUENTIAL_PLAN)
        plan = build_plan("research Acme Corp and then analyze how it fits our product line", None, llm)

        llm.invoke.assert_called_once()
        assert plan.approach is PlanApproach.SEQUENTIAL

    def test_prompt_contains_request_and_caller_role(self):
        llm = planner_llm(SEQUENTIAL_PLAN)
        build_plan("research Acme", CallerContext(id=1, role="manager"), llm)

        messages = llm.invoke.call_args.args[0]
        assert 'User request: "research Acme"' in messages[1].content
        assert "User role: manager" in messages[1].content
        assert "requires_approval" in messages[0].content
        assert llm.invoke.call_args.kwargs["config"] == {"run_name": "build_plan"}

    @pytest.mark.parametrize(
        "message",
        [
            "What's my connect rate this week?",
            "research Acme Corp",
            "The workflow is confusing",
            "do a comprehensive review",
            "hi",
        ],
    )
    def test_unparsable_output_falls_back_to_keyword_route(self, message):
        plan = build_plan(message, None, planner_llm("Sorry, I can't produce a plan."))

        assert plan.approach is PlanApproach.SINGLE
        assert len(plan.steps) == 1
        assert plan.steps[0].worker is route_by_keyword(message)

    def test_invalid_structure_falls_back(self):
        plan = build_plan("analyze metrics", None, planner_llm({"steps": [{"worker": "wizard", "action": "A"}]}))
        assert plan.is_fallback is True
        assert plan.steps[0].worker is WorkerType.ANALYSIS

    def test_completion_error_falls_back(self):
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("rate limited")
        plan = build_plan("analyze metrics", None, llm)

        assert plan.is_fallback is True

    def test_wrapped_completion_error_falls_back(self):
        llm = MagicMock()
        llm.invoke.side_effect = CompletionServiceError("quota", worker_type="planner")
        assert build_plan("hello", None, llm, timeout_s=5).is_fallback is True

    def test_non_string_content_is_stringified(self):
        llm = MagicMock()
        llm.invoke.return_value = MagicMock(content=[{"type": "text", "text": "nothing"}])
        assert isinstance(build_plan("hello", None, llm), Plan)


class TestPlanningPrompt:
    """Tests for the planning instruction."""

    def test_lists_plan_eligible_workers_only(self):
        prompt = build_planning_prompt()

        for value in ("research", "analysis", "experience-review", "general-assistant"):
            assert f'"{value}"' in prompt
        assert '"orchestrator"' not in prompt

    def test_mentions_step_limit(self):
        assert "at most 4 steps" in build_planning_prompt(max_steps=4)
