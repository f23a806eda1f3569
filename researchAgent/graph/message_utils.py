"""Utilities for cleaning and reconciling message histories before a model call."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set

from langchain_core.messages import AIMessage, BaseMessage, ToolMessage

LOGGER = logging.getLogger(__name__)

APPROVAL_YES = "yes"
APPROVAL_NO = "no"
DENIED_MESSAGE = "Error: User denied access to tool execution"


@dataclass(frozen=True, slots=True)
class ConfirmationContext:
    """What a deferred tool execution gets besides its arguments."""

    tool_call_id: str
    messages: List[BaseMessage]


ToolExecution = Callable[[Dict[str, Any], ConfirmationContext], Awaitable[Any]]


def _tool_call_ids(message: AIMessage) -> List[str]:
    ids = []
    for tc in message.tool_calls or []:
        tc_id = tc.get("id") if isinstance(tc, dict) else getattr(tc, "id", None)
        if tc_id:
            ids.append(tc_id)
    return ids


def clean_message_history(messages: List[BaseMessage]) -> List[BaseMessage]:
    """Drop tool turns that never completed.

    A turn is incomplete when an AIMessage requested a tool call that no
    ToolMessage answers (the stream was cut, the process crashed, a loop limit
    stopped the turn). Such AIMessages are removed, and so are ToolMessages
    whose request is no longer in the history. Everything else is returned
    unchanged and in order.

    Args:
        messages: Stored conversation history

    Returns:
        History that is safe to send to the model
    """
    answered_call_ids: Set[str] = {
        msg.tool_call_id for msg in messages if isinstance(msg, ToolMessage) and msg.tool_call_id
    }

    cleaned: List[BaseMessage] = []
    kept_call_ids: Set[str] = set()
    dropped = 0
    for msg in messages:
        if isinstance(msg, AIMessage) and msg.tool_calls:
            call_ids = _tool_call_ids(msg)
            if len(call_ids) != len(msg.tool_calls) or any(
                call_id not in answered_call_ids for call_id in call_ids
            ):
                dropped += 1
                continue
            kept_call_ids.update(call_ids)
        elif isinstance(msg, ToolMessage) and msg.tool_call_id not in kept_call_ids:
            dropped += 1
            continue
        cleaned.append(msg)

    if dropped:
        LOGGER.info(f"Cleaned message history: dropped {dropped} incomplete tool message(s)")
    return cleaned


def _stringify_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result, ensure_ascii=False, default=str)


async def reconcile_confirmations(
    messages: List[BaseMessage],
    executions: Optional[Mapping[str, ToolExecution]],
) -> List[BaseMessage]:
    """Resolve human approvals recorded for tools without an inline handler.

    Such tools get the human's decision as their ToolMessage content. For
    tools listed in ``executions``:
    - "yes": run the execution now and record its result
    - "no": record DENIED_MESSAGE as an error
    - anything else: leave the message as it is (still awaiting a decision)

    Args:
        messages: Cleaned history
        executions: Tool name → deferred execution (empty in production)

    Returns:
        New history list; untouched messages are the same objects
    """
    if not executions:
        return messages

    tool_calls: Dict[str, dict] = {}
    for msg in messages:
        if isinstance(msg, AIMessage):
            for tc in msg.tool_calls or []:
                if tc.get("id"):
                    tool_calls[tc["id"]] = tc

    reconciled: List[BaseMessage] = []
    for msg in messages:
        if not isinstance(msg, ToolMessage):
            reconciled.append(msg)
            continue

        call = tool_calls.get(msg.tool_call_id)
        tool_name = msg.name or (call or {}).get("name")
        if tool_name not in executions or not isinstance(msg.content, str):
            reconciled.append(msg)
            continue

        decision = msg.content.strip().lower()
        if decision == APPROVAL_YES:
            args = (call or {}).get("args", {})
            LOGGER.info(f"Executing approved tool call: {tool_name} ({msg.tool_call_id})")
            result = await executions[tool_name](
                args, ConfirmationContext(tool_call_id=msg.tool_call_id, messages=list(messages))
            )
            reconciled.append(msg.model_copy(update={"content": _stringify_result(result)}))
        elif decision == APPROVAL_NO:
            LOGGER.info(f"Tool call denied by user: {tool_name} ({msg.tool_call_id})")
            reconciled.append(msg.model_copy(update={"content": DENIED_MESSAGE, "status": "error"}))
        else:
            reconciled.append(msg)

    return reconciled


def message_text(message: BaseMessage) -> str:
    """Plain text of a message, joining text blocks of list content."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
