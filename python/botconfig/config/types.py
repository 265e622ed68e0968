from dataclasses import dataclass, field
from typing import List, Optional

from botconfig.config.schema import BotConfig


@dataclass(frozen=True)
class ConfigValidationIssue:
    """A problem at a dotted location in the config tree."""
    path: str
    message: str

    def to_dict(self) -> dict:
        return {'path': self.path, 'message': self.message}


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a raw config.

    Either ``ok`` is True and ``config`` holds the validated, defaulted config,
    or ``ok`` is False and ``issues`` lists every reported problem.
    """
    ok: bool
    config: Optional[BotConfig] = None
    issues: List[ConfigValidationIssue] = field(default_factory=list)

    @classmethod
    def success(cls, config: BotConfig) -> 'ValidationResult':
        return cls(ok=True, config=config)

    @classmethod
    def failure(cls, issues) -> 'ValidationResult':
        issues = list(issues)
        if not issues:
            raise ValueError('a failed validation needs at least one issue')
        return cls(ok=False, issues=issues)

    def to_dict(self) -> dict:
        if self.ok:
            return {'ok': True, 'config': self.config.to_dict()}
        return {'ok': False, 'issues': [issue.to_dict() for issue in self.issues]}
