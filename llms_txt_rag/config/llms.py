"""Chat model construction."""

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from .settings import Settings


def create_chat_model(settings: Settings) -> BaseChatModel:
    """Create the chat model used for summaries, selection and answers.

    Raises:
        ConfigurationMissingError: if the API key or model name is unset.
    """
    return ChatOpenAI(
        model=settings.require("model_name"),
        api_key=settings.require("openai_api_key"),
        temperature=0,
        timeout=None,
        max_retries=2,
    )
