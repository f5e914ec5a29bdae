"""Tests for request routing."""

import pytest

from director.agents.orchestrator.router import (
    detect_explicit_worker,
    route_by_keyword,
    route_request,
    strip_mentions,
    validate_request,
)
from director.agents.types import CallerContext, DirectorRequest, WorkerType
from director.errors import InvalidRequestError


def _request(message: str, **kwargs) -> DirectorRequest:
    return DirectorRequest(message=message, caller=CallerContext(id=1), **kwargs)


class TestDetectExplicitWorker:
    """Tests for @mention detection."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("@research tell me about Acme Corp", WorkerType.RESEARCH),
            ("@Researcher what's new with Globex?", WorkerType.RESEARCH),
            ("@analyst how is my week going", WorkerType.ANALYSIS),
            ("@business compare Q1 and Q2", WorkerType.ANALYSIS),
            ("@ux audit the dialer", WorkerType.EXPERIENCE_REVIEW),
            ("@design simplify lead import", WorkerType.EXPERIENCE_REVIEW),
            ("@sage any coaching tips?", WorkerType.GENERAL_ASSISTANT),
            ("@director full diagnosis please", WorkerType.ORCHESTRATOR),
        ],
    )
    def test_recognises_aliases(self, message, expected):
        assert detect_explicit_worker(message) is expected

    def test_first_recognised_marker_wins(self):
        """Unknown mentions are skipped; the first known one is returned."""
        assert detect_explicit_worker("@bob please ask @ux and then @research") is WorkerType.EXPERIENCE_REVIEW

    def test_no_mention_returns_none(self):
        assert detect_explicit_worker("research Acme Corp") is None

    def test_unknown_mention_returns_none(self):
        assert detect_explicit_worker("@nobody hello") is None

    @pytest.mark.parametrize(
        "message",
        ["Draft a follow-up for pat@research.io about pricing", "email sam@ux.example.com", "ping ops.@sage"],
    )
    def test_email_addresses_are_not_mentions(self, message):
        assert detect_explicit_worker(message) is None

    def test_mention_at_sentence_end(self):
        assert detect_explicit_worker("Can you look at this @research.") is WorkerType.RESEARCH


class TestStripMentions:
    """Tests for mention stripping."""

    def test_strips_leading_mention(self):
        assert strip_mentions("@research tell me about Acme Corp") == "tell me about Acme Corp"

    def test_strips_every_mention(self):
        assert strip_mentions("ask @ux and @sage now") == "ask and now"

    def test_mentions_only_yields_empty(self):
        assert strip_mentions("@research   ") == ""

    def test_email_addresses_are_kept(self):
        message = "Draft a follow-up for pat@research.io about pricing"
        assert strip_mentions(message) == message


class TestRouteByKeyword:
    """Tests for the keyword heuristic."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("Can you research Initech?", WorkerType.RESEARCH),
            ("Find pain points for this lead", WorkerType.RESEARCH),
            ("What's my connect rate this week?", WorkerType.ANALYSIS),
            ("Why is our pipeline shrinking", WorkerType.ANALYSIS),
            ("Forecast next month", WorkerType.ANALYSIS),
            ("The dialer workflow has too much friction", WorkerType.EXPERIENCE_REVIEW),
            ("Suggest improvements to the lead page", WorkerType.EXPERIENCE_REVIEW),
            ("Give me a comprehensive review", WorkerType.ORCHESTRATOR),
            ("Hello there", WorkerType.GENERAL_ASSISTANT),
        ],
    )
    def test_groups(self, message, expected):
        assert route_by_keyword(message) is expected

    def test_group_order_research_before_analysis(self):
        assert route_by_keyword("research Acme Corp and then analyze the metrics") is WorkerType.RESEARCH

    def test_matches_at_word_start_only(self):
        """'rate' must not match inside 'accurate', 'ui' not inside 'build'."""
        assert route_by_keyword("Build an accurate summary") is WorkerType.GENERAL_ASSISTANT

    def test_case_insensitive(self):
        assert route_by_keyword("METRICS please") is WorkerType.ANALYSIS

    def test_never_fails_on_empty(self):
        assert route_by_keyword("") is WorkerType.GENERAL_ASSISTANT


class TestValidateRequest:
    """Tests for caller-input validation."""

    @pytest.mark.parametrize("message", ["", "   ", "@research", "@ux @sage  "])
    def test_rejects_empty_messages(self, message):
        with pytest.raises(InvalidRequestError):
            validate_request(_request(message))

    def test_accepts_normal_message(self):
        validate_request(_request("hello"))


class TestRouteRequest:
    """Tests for the fast-path decision."""

    def test_explicit_mention_takes_fast_path(self):
        decision = route_request(_request("@research tell me about Acme Corp"))
        assert decision.fast_path is True
        assert decision.worker_type is WorkerType.RESEARCH
        assert decision.message == "tell me about Acme Corp"

    def test_explicit_worker_field_takes_fast_path(self):
        decision = route_request(_request("tell me about Acme Corp", explicit_worker=WorkerType.ANALYSIS))
        assert decision.fast_path is True
        assert decision.worker_type is WorkerType.ANALYSIS

    def test_email_address_goes_to_planning_unchanged(self):
        decision = route_request(_request("Draft a follow-up for pat@research.io about pricing"))
        assert decision.fast_path is False
        assert decision.worker_type is None
        assert decision.message == "Draft a follow-up for pat@research.io about pricing"

    def test_mention_wins_over_explicit_worker_field(self):
        decision = route_request(_request("@ux check this", explicit_worker=WorkerType.ANALYSIS))
        assert decision.worker_type is WorkerType.EXPERIENCE_REVIEW

    def test_orchestrator_mention_goes_to_planning(self):
        decision = route_request(_request("@director diagnose our qualification rate"))
        assert decision.fast_path is False
        assert decision.message == "diagnose our qualification rate"

    def test_no_mention_goes_to_planning(self):
        decision = route_request(_request("What's my connect rate this week?"))
        assert decision.fast_path is False
        assert decision.worker_type is None

    def test_keyword_routing_takes_fast_path_when_enabled(self):
        decision = route_request(_request("What's my connect rate this week?"), keyword_routing=True)
        assert decision.fast_path is True
        assert decision.worker_type is WorkerType.ANALYSIS

    def test_keyword_routing_to_orchestrator_still_plans(self):
        decision = route_request(_request("a comprehensive review of everything"), keyword_routing=True)
        assert decision.fast_path is False
        assert decision.worker_type is WorkerType.ORCHESTRATOR
