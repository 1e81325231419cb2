"""
Configuration management for the llms.txt RAG system.
Handles GitHub credentials, OpenAI settings and MCP server options.
"""

import os
from dataclasses import dataclass, field, fields
from typing import List, Optional

from dotenv import load_dotenv

from ..exceptions import ConfigurationMissingError


SUPPORTED_LANGUAGES = ("en", "ja")

# Field name -> environment variable name
ENV_NAMES = {
    "github_token": "GITHUB_TOKEN",
    "organization": "GITHUB_ORGANIZATION",
    "llms_txt_repository": "LLMS_TXT_REPOSITORY",
    "openai_api_key": "OPENAI_API_KEY",
    "model_name": "MODEL_NAME",
    "github_api_url": "GITHUB_API_URL",
    "base_branch": "LLMS_TXT_BASE_BRANCH",
    "prompt_language": "PROMPT_LANGUAGE",
    "server_host": "MCP_SERVER_HOST",
    "server_port": "MCP_SERVER_PORT",
    "server_url": "MCP_SERVER_URL",
    "tool_timeout_seconds": "MCP_TOOL_TIMEOUT_SECONDS",
    "max_file_size": "LLMS_TXT_MAX_FILE_SIZE",
    "exclude_patterns": "LLMS_TXT_EXCLUDE_PATTERNS",
}


@dataclass
class Settings:
    """Runtime settings.

    Loading never fails: secrets and identifiers are optional here and are
    checked with :meth:`require` by the operation that needs them.
    """
    github_token: Optional[str] = None
    organization: Optional[str] = None
    llms_txt_repository: Optional[str] = None
    openai_api_key: Optional[str] = None
    model_name: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    base_branch: str = "main"
    prompt_language: str = "en"
    server_host: str = "0.0.0.0"
    server_port: int = 3001
    server_url: str = "http://localhost:3001/sse"
    tool_timeout_seconds: float = 300.0
    max_file_size: int = 1024 * 1024
    exclude_patterns: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.prompt_language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported prompt language: {self.prompt_language!r} "
                f"(expected one of {', '.join(SUPPORTED_LANGUAGES)})"
            )

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Load settings from environment variables (and a .env file)."""
        if dotenv:
            load_dotenv()

        def _get(name: str) -> Optional[str]:
            value = os.getenv(ENV_NAMES[name])
            return value if value else None

        defaults = cls()
        return cls(
            github_token=_get("github_token"),
            organization=_get("organization"),
            llms_txt_repository=_get("llms_txt_repository"),
            openai_api_key=_get("openai_api_key"),
            model_name=_get("model_name"),
            github_api_url=_get("github_api_url") or defaults.github_api_url,
            base_branch=_get("base_branch") or defaults.base_branch,
            prompt_language=(_get("prompt_language") or defaults.prompt_language).lower(),
            server_host=_get("server_host") or defaults.server_host,
            server_port=int(_get("server_port") or defaults.server_port),
            server_url=_get("server_url") or defaults.server_url,
            tool_timeout_seconds=float(_get("tool_timeout_seconds") or defaults.tool_timeout_seconds),
            max_file_size=int(_get("max_file_size") or defaults.max_file_size),
            exclude_patterns=_split_patterns(_get("exclude_patterns")),
        )

    def require(self, name: str) -> str:
        """Return a setting or raise ConfigurationMissingError if it is unset."""
        if name not in {f.name for f in fields(self)}:
            raise AttributeError(f"Unknown setting: {name}")
        value = getattr(self, name)
        if value is None or value == "":
            raise ConfigurationMissingError(ENV_NAMES[name])
        return value


def _split_patterns(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
