"""Prompt templates and logging helpers."""

from .prompts import PromptSet, get_prompts
from .llm_logger import LLMCallLogger, invoke_prompt, llm_logger

__all__ = ["PromptSet", "get_prompts", "LLMCallLogger", "invoke_prompt", "llm_logger"]
