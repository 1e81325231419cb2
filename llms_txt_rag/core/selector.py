"""Candidate file selection from llms.txt summaries."""

import json
import logging
from typing import Iterable, List, Tuple

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import TypeAdapter, ValidationError

from ..exceptions import CandidateParseError
from ..models.rag_models import CandidateFile
from ..utils.llm_logger import invoke_prompt
from ..utils.prompts import get_prompts
from .output_parser import extract_output

logger = logging.getLogger(__name__)

_CANDIDATE_LIST = TypeAdapter(List[CandidateFile])


def build_corpus_context(summaries: Iterable[Tuple[str, str]], language: str = "en") -> str:
    """Concatenate (repository name, llms.txt text) pairs into one context.

    The trailing run of newlines is removed from the result.
    """
    prompts = get_prompts(language)
    context = ""
    for repository_name, text in summaries:
        context += (
            f"{prompts.repository_name_label}: {repository_name}\n"
            f"{prompts.repository_info_label}:\n"
            f"```\n{text}\n```\n"
            "\n"
        )
    return context.rstrip("\n")


def parse_candidates(payload: str) -> List[CandidateFile]:
    """Parse the JSON list found inside an <output> block.

    Raises:
        CandidateParseError: if the payload is not a JSON list of candidates
    """
    try:
        return _CANDIDATE_LIST.validate_python(json.loads(payload))
    except (json.JSONDecodeError, ValidationError) as e:
        raise CandidateParseError(f"Unexpected candidate list from model: {e}") from e


class CandidateSelector:
    """Asks the model which repository files are relevant to a request."""

    def __init__(self, chat_model: BaseChatModel, language: str = "en"):
        self.chat_model = chat_model
        self.prompt = ChatPromptTemplate.from_messages([("human", get_prompts(language).search)])

    def build_prompt(self, user_request: str, corpus_context: str) -> str:
        """Render the selection prompt as plain text."""
        messages = self.prompt.format_messages(context=corpus_context, user_request=user_request)
        return messages[0].content

    async def select(self, user_request: str, corpus_context: str) -> List[CandidateFile]:
        """
        Select candidate files for a request.

        Args:
            user_request: Natural language request
            corpus_context: Output of build_corpus_context

        Returns:
            Candidates in model order, possibly empty or with duplicates

        Raises:
            CandidateParseError: if the <output> block holds malformed JSON
        """
        if not corpus_context.strip():
            logger.info("No summaries available; skipping candidate selection")
            return []

        response = await invoke_prompt(
            self.prompt,
            self.chat_model,
            {"context": corpus_context, "user_request": user_request},
            agent_name="CandidateSelector",
        )

        payload = extract_output(response)
        if payload is None:
            logger.warning("No <output> block in selection response; returning no candidates")
            return []

        candidates = parse_candidates(payload)
        logger.info(f"Selected {len(candidates)} candidate files")
        return candidates
