"""Shared exception classes for skillcopy."""


class SkillCopyError(Exception):
    """Base exception for skillcopy errors."""


class UsageError(SkillCopyError):
    """Raised when the command line cannot be parsed."""


class PathNotFoundError(SkillCopyError):
    """Raised when a source or target directory doesn't exist."""


class NoSkillsFoundError(SkillCopyError):
    """Raised when no installed skills are found in the source project."""


class ConfigParseError(SkillCopyError):
    """Raised when the skillcopy config file cannot be parsed."""


class LockFileError(SkillCopyError):
    """Raised when the skill lock file cannot be read or written."""


class RegistryError(SkillCopyError):
    """Raised when the skills registry search fails."""


class SourceParseError(SkillCopyError):
    """Raised when an install source identifier is not understood."""


class RepoNotFoundError(SkillCopyError):
    """Raised when the source repository doesn't exist."""


class SkillNotFoundError(SkillCopyError):
    """Raised when a requested skill doesn't exist in the source."""


class InstallError(SkillCopyError):
    """Raised when a skill cannot be installed into the target."""


class UnknownAgentError(SkillCopyError):
    """Raised when an agent identifier is not known."""


def error_message(error: BaseException) -> str:
    """Normalize an exception to a message string for display."""
    message = str(error)
    return message if message else type(error).__name__
