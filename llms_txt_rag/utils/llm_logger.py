"""
Utility for logging LLM interactions.
Provides logging of prompts, responses, token usage and call duration.
"""

import json
import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Mapping

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate


class LLMCallLogger:
    """Utility class for logging chat model interactions."""

    def __init__(self, logger_name: str = "llm_api", preview_chars: int = 200):
        """Initialize with a specific logger."""
        self.logger = logging.getLogger(logger_name)
        self.preview_chars = preview_chars

    def log_llm_call(
        self,
        agent_name: str,
        messages: List[BaseMessage],
        model: str,
        response: Any,
        duration_ms: float,
    ) -> None:
        """
        Log a complete chat model interaction.

        Args:
            agent_name: Component making the call (e.g. 'CandidateSelector')
            messages: Prompt messages sent to the model
            model: Model identifier
            response: Message returned by the model
            duration_ms: Request duration in milliseconds
        """
        response_data = self._extract_response_data(response)

        self.logger.info("=" * 80)
        self.logger.info(f"LLM Call - {agent_name}")
        self.logger.info("=" * 80)
        self.logger.info(f"Request Messages ({len(messages)} messages):")
        for i, msg in enumerate(messages):
            content = message_text(msg)
            suffix = "..." if len(content) > self.preview_chars else ""
            self.logger.info(f"  [{i+1}] {msg.type.upper()}: {content[:self.preview_chars]}{suffix}")

        if response_data.get("content"):
            self.logger.info(f"Response Content: {response_data['content']}")

        if response_data.get("usage"):
            usage = response_data["usage"]
            self.logger.info(f"Token Usage - Input: {usage.get('input_tokens', 0)}, "
                             f"Output: {usage.get('output_tokens', 0)}, "
                             f"Total: {usage.get('total_tokens', 0)}")

        self.logger.info(f"Duration: {duration_ms:.2f}ms | Model: {model}")
        self.logger.info("=" * 80)

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "agent": agent_name,
            "model": model,
            "response": response_data,
            "duration_ms": duration_ms,
        }
        self.logger.debug(f"FULL_LLM_LOG: {json.dumps(log_entry, ensure_ascii=False, default=str)}")

    def _extract_response_data(self, response: Any) -> Dict[str, Any]:
        """Extract relevant data from a chat model response message."""
        if response is None:
            return {}

        try:
            data = {"id": getattr(response, "id", None)}
            usage = getattr(response, "usage_metadata", None)
            if usage:
                data["usage"] = dict(usage)
            if isinstance(response, BaseMessage):
                data["content"] = message_text(response)
            return data
        except Exception as e:
            self.logger.warning(f"Failed to extract response data: {e}")
            return {"error": str(e)}


def message_text(message: BaseMessage) -> str:
    """Return the text of a message whose content may be a list of parts."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def model_identifier(chat_model: BaseChatModel) -> str:
    for attr in ("model_name", "model"):
        value = getattr(chat_model, attr, None)
        if isinstance(value, str) and value:
            return value
    return type(chat_model).__name__


async def invoke_prompt(
    prompt: ChatPromptTemplate,
    chat_model: BaseChatModel,
    variables: Mapping[str, Any],
    agent_name: str,
) -> str:
    """Render a prompt, call the chat model and return the response text.

    The call is logged through the module-level ``llm_logger``. Errors from
    the model are logged and re-raised.
    """
    messages = prompt.format_messages(**variables)
    model = model_identifier(chat_model)

    start_time = time.time()
    try:
        response = await chat_model.ainvoke(messages)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        llm_logger.logger.error(f"LLM call failed in {agent_name}: {e} (took {duration_ms:.2f}ms)")
        raise
    duration_ms = (time.time() - start_time) * 1000

    llm_logger.log_llm_call(
        agent_name=agent_name,
        messages=messages,
        model=model,
        response=response,
        duration_ms=duration_ms,
    )
    return message_text(response)


# Global logger instance
llm_logger = LLMCallLogger()
