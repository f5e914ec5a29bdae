"""Tests for the worker-role registry."""

import pytest

from director.agents.roles import (
    WORKER_ROLES,
    build_instructions,
    clear_instruction_cache,
    get_role,
    plan_eligible_roles,
)
from director.agents.types import CallerContext, WorkerType
from director.errors import UnknownWorkerError


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_instruction_cache()
    yield
    clear_instruction_cache()


class TestWorkerType:
    """Tests for WorkerType parsing."""

    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("research", WorkerType.RESEARCH),
            ("Researcher", WorkerType.RESEARCH),
            ("business_analyst", WorkerType.ANALYSIS),
            ("ux-agent", WorkerType.EXPERIENCE_REVIEW),
            ("@sage", WorkerType.GENERAL_ASSISTANT),
            ("director", WorkerType.ORCHESTRATOR),
        ],
    )
    def test_parse_aliases(self, identifier, expected):
        assert WorkerType.parse(identifier) is expected

    def test_parse_unknown(self):
        with pytest.raises(UnknownWorkerError) as exc_info:
            WorkerType.parse("wizard")
        assert exc_info.value.identifier == "wizard"

    def test_orchestrator_not_plan_eligible(self):
        assert [w for w in WorkerType if not w.plan_eligible] == [WorkerType.ORCHESTRATOR]


class TestRegistry:
    """Tests for the static registry."""

    def test_exhaustive(self):
        assert set(WORKER_ROLES) == set(WorkerType)

    def test_token_budgets(self):
        budgets = {w: r.token_budget for w, r in WORKER_ROLES.items()}
        assert budgets == {
            WorkerType.RESEARCH: 6000,
            WorkerType.ANALYSIS: 4000,
            WorkerType.EXPERIENCE_REVIEW: 4000,
            WorkerType.GENERAL_ASSISTANT: 2000,
            WorkerType.ORCHESTRATOR: 4000,
        }

    def test_plan_eligible_roles(self):
        assert [r.worker_type for r in plan_eligible_roles()] == [
            WorkerType.RESEARCH,
            WorkerType.ANALYSIS,
            WorkerType.EXPERIENCE_REVIEW,
            WorkerType.GENERAL_ASSISTANT,
        ]


class TestInstructionOverrides:
    """Tests for markdown instruction files."""

    def test_canonical_file_overrides_builtin(self, tmp_path):
        (tmp_path / "research.md").write_text(
            "# Researcher\n\n**Capabilities:**\n- Firmographics\n- Tech stack lookup\n\n## Output\nBe brief.",
            encoding="utf-8",
        )
        role = get_role(WorkerType.RESEARCH, tmp_path)

        assert role.instruction_text.startswith("# Researcher")
        assert role.capabilities == ("Firmographics", "Tech stack lookup")
        assert role.token_budget == 6000

    def test_legacy_file_name(self, tmp_path):
        (tmp_path / "business-analyst.md").write_text("Legacy analyst prompt", encoding="utf-8")
        assert get_role(WorkerType.ANALYSIS, tmp_path).instruction_text == "Legacy analyst prompt"

    def test_missing_file_uses_builtin(self, tmp_path):
        assert get_role(WorkerType.EXPERIENCE_REVIEW, tmp_path) == WORKER_ROLES[WorkerType.EXPERIENCE_REVIEW]

    def test_cached_until_cleared(self, tmp_path):
        path = tmp_path / "research.md"
        path.write_text("v1", encoding="utf-8")
        assert get_role(WorkerType.RESEARCH, tmp_path).instruction_text == "v1"

        path.write_text("v2", encoding="utf-8")
        assert get_role(WorkerType.RESEARCH, tmp_path).instruction_text == "v1"

        clear_instruction_cache()
        assert get_role(WorkerType.RESEARCH, tmp_path).instruction_text == "v2"


class TestBuildInstructions:
    """Tests for build_instructions()."""

    def test_without_caller(self):
        text = build_instructions(WorkerType.GENERAL_ASSISTANT)
        assert text.startswith("You are Sage")
        assert "Current User Context" not in text
        assert text.rstrip().endswith("be specific to this platform's capabilities.")

    def test_with_caller(self):
        text = build_instructions(WorkerType.ANALYSIS, CallerContext(id=3, role="manager"))
        assert "## Current User Context\n- User Role: manager\n" in text
        assert "User Name" not in text
