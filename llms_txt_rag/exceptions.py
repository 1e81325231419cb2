"""Exception hierarchy for the llms.txt RAG system."""


class LlmsTxtRagError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationMissingError(LlmsTxtRagError):
    """A required environment setting is not available."""

    def __init__(self, env_name: str):
        self.env_name = env_name
        super().__init__(f"{env_name} environment variable is not set.")


class GitHubAPIError(LlmsTxtRagError):
    """A write call against the GitHub REST API failed."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class ModelResponseMalformedError(LlmsTxtRagError):
    """The language model did not answer in the expected format."""


class CandidateParseError(ModelResponseMalformedError):
    """The candidate list inside an <output> block could not be parsed."""
