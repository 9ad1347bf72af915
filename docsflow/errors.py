"""
Exceptions raised by the documentation pipeline.
"""

from typing import Optional


class DocsflowError(Exception):
    """Base class for all docsflow failures."""


class ConfigurationError(DocsflowError):
    """The project or docsflow itself is not configured for documentation."""


class GenerationError(DocsflowError):
    """The documentation generator could not be run or exited non-zero."""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ''):
        super().__init__(message)
        self.returncode = returncode
        self.output = output

    def __str__(self) -> str:
        message = super().__str__()
        if self.output:
            return f"{message}\n{self.output.rstrip()}"
        return message


class AuthError(DocsflowError):
    """The git remote could not be configured with publishing credentials."""


class PublishError(DocsflowError):
    """Pushing generated documentation to the hosting branch failed."""
