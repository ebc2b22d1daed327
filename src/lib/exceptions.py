"""
Error taxonomy for calloutforge

Every failure raised by the parser, tokenizer, compiler and loaders derives
from CalloutForgeError so a host can catch a single type and present the
message to the user.
"""

from typing import Iterable, List, Optional


class CalloutForgeError(Exception):
    """Base class of every calloutforge failure"""
    pass


class InputError(CalloutForgeError):
    """Raised when the codeblock source is empty or whitespace-only"""
    pass


class CodeblockSyntaxError(CalloutForgeError, SyntaxError):
    """
    Raised when a codeblock violates the codeblock grammar

    Covers a codeblock not starting with a property and a code fence left
    open at end of input.

    Attributes:
        line_number: 1-based source line the error refers to (None if unknown)
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class UnknownTransitionError(CalloutForgeError, RuntimeError):
    """
    Raised when a line category has no transition from the current state

    This signals a defect in the transition table, not a user mistake.
    """

    def __init__(self, line_number: int, category: str, state: str) -> None:
        super().__init__(
            f"Line {line_number}: no transition for {category} from state {state}"
        )
        self.line_number = line_number
        self.category = category
        self.state = state


class DuplicateKeyError(CalloutForgeError):
    """
    Raised when one or more property keys are declared more than once

    Attributes:
        keys: Every duplicated key, in first-seen order
    """

    def __init__(self, keys: Iterable[str]) -> None:
        self.keys: List[str] = list(keys)
        super().__init__(f"Duplicate keys found: {', '.join(self.keys)}")


class TokenizeError(CalloutForgeError):
    """Raised when a template cannot be tokenized or queried"""
    pass


class SyntaxRegistryError(TokenizeError):
    """Raised when two placeholder syntaxes share a name or a pattern"""
    pass


class TokenConflictError(TokenizeError):
    """
    Raised when a template reuses a placeholder name incompatibly

    Attributes:
        name: The placeholder name
    """

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Token conflict: placeholder '{name}' {reason}")
        self.name = name


class CompileError(CalloutForgeError):
    """Raised when a tokenized template cannot be compiled"""
    pass


class MissingRequiredError(CompileError):
    """
    Raised when required placeholders have no matching property

    Attributes:
        names: Every unresolved required name, in document order
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names: List[str] = list(names)
        super().__init__(
            f"Missing value for required placeholder(s): {', '.join(self.names)}"
        )


class TemplateNotFoundError(CalloutForgeError):
    """Raised when a template cannot be located or read"""
    pass
