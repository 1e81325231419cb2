"""Configuration modules for the llms.txt RAG system."""

from .settings import Settings
from .llms import create_chat_model

__all__ = ["Settings", "create_chat_model"]
