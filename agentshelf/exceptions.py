"""Custom exceptions for agentshelf."""


class AgentShelfError(Exception):
    """Base exception for agentshelf."""

    pass


class DocumentError(AgentShelfError):
    """Document could not be read or parsed."""

    pass


class FrontmatterError(DocumentError):
    """Invalid YAML frontmatter."""

    pass


class DocumentNotFoundError(AgentShelfError):
    """Requested document does not exist."""

    pass


class ToolPermissionError(AgentShelfError):
    """Operation not covered by a document's allowed-tools."""

    pass


class ConfigError(AgentShelfError):
    """Configuration file is invalid."""

    pass
