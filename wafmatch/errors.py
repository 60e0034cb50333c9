from __future__ import annotations
from typing import Optional


class RuleSetError(RuntimeError):
    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        self.provider = provider
        if provider:
            message = f"compiling rule for {provider}: {message}"
        super().__init__(message)


class RuleReadError(RuleSetError):
    pass


class RuleParseError(RuleSetError):
    pass


class InvalidRuleFormatError(RuleSetError):
    def __init__(self, value: str, *, provider: Optional[str] = None) -> None:
        self.value = value
        super().__init__(f"invalid status code format: {value}", provider=provider)


class InvalidPatternError(RuleSetError):
    def __init__(self, pattern: str, *, provider: Optional[str] = None) -> None:
        self.pattern = pattern
        super().__init__(f"invalid body regex pattern {pattern!r}", provider=provider)
