"""LLM-backed Worker Invoker."""

from __future__ import annotations

import logging
import time
from typing import Any, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from director.agents.roles import build_instructions
from director.agents.types import CallerContext, ConversationTurn, InvocationResult, WorkerType
from director.agents.workers.context import inject_activity
from director.agents.workers.deadline import CancellationToken, call_with_deadline
from director.errors import CompletionServiceError, EmptyCompletionError, WorkerInvocationError
from director.factory import DefaultLLMFactory

logger = logging.getLogger(__name__)


def _effective_timeout(*timeouts: float | None) -> float | None:
    bounded = [t for t in timeouts if t is not None]
    return min(bounded) if bounded else None


def response_text(response: Any) -> str:
    """Extract text content from a chat model response."""
    content = getattr(response, "content", response)
    return content if isinstance(content, str) else str(content)


def response_output_tokens(response: Any) -> int | None:
    """Best-effort output token count from a chat model response."""
    usage = getattr(response, "usage_metadata", None)
    if isinstance(usage, dict):
        tokens = usage.get("output_tokens")
        return tokens if isinstance(tokens, int) else None
    return None


class LLMWorkerInvoker:
    """Invokes workers through a LangChain chat model.

    Either a single `llm` is shared by every role, or an `llm_factory` builds one
    model per role (role model choice, token budget and worker temperature).
    """

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        llm_factory: DefaultLLMFactory | None = None,
        invocation_timeout_s: float | None = 120.0,
        temperature: float = 0.7,
        agents_dir: str | None = None,
    ):
        if llm is None and llm_factory is None:
            raise ValueError("Either llm or llm_factory must be provided")
        self.llm = llm
        self.llm_factory = llm_factory
        self.invocation_timeout_s = invocation_timeout_s
        self.temperature = temperature
        self.agents_dir = agents_dir
        self._llms: dict[WorkerType, BaseChatModel] = {}

    def _llm_for(self, worker_type: WorkerType) -> BaseChatModel:
        if self.llm_factory is None:
            assert self.llm is not None
            return self.llm
        if worker_type not in self._llms:
            self._llms[worker_type] = self.llm_factory.get_worker_llm(
                worker_type, temperature=self.temperature, agents_dir=self.agents_dir
            )
        return self._llms[worker_type]

    def build_messages(
        self,
        worker_type: WorkerType,
        task: str,
        caller: CallerContext | None = None,
        include_activity: bool = False,
        history: Sequence[ConversationTurn] = (),
    ) -> list[BaseMessage]:
        """Build the message list for one invocation (pure helper for tests)."""
        messages: list[BaseMessage] = [
            SystemMessage(content=build_instructions(worker_type, caller, self.agents_dir))
        ]
        for turn in history:
            if turn.role == "user":
                messages.append(HumanMessage(content=turn.content))
            elif turn.role == "assistant":
                messages.append(AIMessage(content=turn.content))

        if include_activity and caller is not None:
            task = inject_activity(task, caller.activity_snapshot)
        messages.append(HumanMessage(content=task))
        return messages

    def invoke(
        self,
        worker_type: WorkerType,
        task: str,
        caller: CallerContext | None = None,
        *,
        include_activity: bool = False,
        history: Sequence[ConversationTurn] = (),
        timeout_s: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> InvocationResult:
        started = time.monotonic()
        logger.info("Starting %s worker invocation", worker_type.value)

        messages = self.build_messages(worker_type, task, caller, include_activity, history)
        llm = self._llm_for(worker_type)

        def _complete() -> Any:
            return llm.invoke(messages, config={"run_name": f"worker:{worker_type.value}"})

        try:
            response = call_with_deadline(
                _complete,
                _effective_timeout(self.invocation_timeout_s, timeout_s),
                cancel_token,
                worker_type=worker_type.value,
            )
        except WorkerInvocationError:
            raise
        except Exception as e:
            raise CompletionServiceError(f"Completion service failed: {e}", worker_type=worker_type.value) from e

        text = response_text(response)
        if not text.strip():
            raise EmptyCompletionError("No text content in worker response", worker_type=worker_type.value)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info("%s worker completed in %dms", worker_type.value, elapsed_ms)
        return InvocationResult(
            text=text,
            worker_type=worker_type,
            execution_time_ms=elapsed_ms,
            tokens_used=response_output_tokens(response),
        )
