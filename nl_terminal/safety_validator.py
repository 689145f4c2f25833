"""Safety validation layer run on every command before execution."""

import re
from typing import List, Sequence

from .models import PatternRule, RiskLevel, SafetyLevel, SafetyVerdict
from .patterns import DANGEROUS_RULES, OVERWRITE_DISK, WARNING_RULES

MAX_COMMAND_LENGTH = 500

_SUBSTITUTION_PATTERNS = (re.compile(r'\$\(.*\)'), re.compile(r'`.*`'))
_SYSTEM_REDIRECT = re.compile(r'>\s*/')

_SECRET_PATTERNS = (
    (re.compile(r'password[=:]\s*\S+', re.IGNORECASE), "password=***"),
    (re.compile(r'token[=:]\s*\S+', re.IGNORECASE), "token=***"),
    (re.compile(r'api[_-]?key[=:]\s*\S+', re.IGNORECASE), "api_key=***"),
    (re.compile(r'secret[=:]\s*\S+', re.IGNORECASE), "secret=***"),
)


class SafetyValidator:
    """Classifies shell commands against the dangerous and warning patterns."""

    def __init__(
        self,
        dangerous_rules: Sequence[PatternRule] = DANGEROUS_RULES,
        warning_rules: Sequence[PatternRule] = WARNING_RULES
    ):
        self._dangerous_rules = tuple(dangerous_rules)
        self._warning_rules = tuple(warning_rules)

    def validate(self, command: str, safety_level=SafetyLevel.MODERATE) -> SafetyVerdict:
        """
        Validate a shell command before execution.

        Every matching rule is reported, not only the first one.

        Args:
            command: Shell command to check.
            safety_level: SafetyLevel or its string value.

        Returns:
            SafetyVerdict describing the risk.

        Raises:
            ValidationError: If safety_level is not a known level.
        """
        safety_level = SafetyLevel.coerce(safety_level)

        blocked_rules = [rule for rule in self._dangerous_rules if rule.matches(command)]
        blocked_patterns = [rule.description for rule in blocked_rules]
        warnings = [rule.description for rule in self._warning_rules if rule.matches(command)]
        suggestions: List[str] = []

        is_safe = True
        risk_level = RiskLevel.SAFE

        if blocked_patterns:
            is_safe = False
            risk_level = RiskLevel.DANGER
            suggestions.append("This command contains dangerous operations that could harm your system.")
            suggestions.append("Consider using safer alternatives or consult documentation.")
        elif warnings:
            risk_level = RiskLevel.WARNING
            if safety_level == SafetyLevel.STRICT:
                is_safe = False
                suggestions.append("Strict safety mode blocks potentially risky commands.")
                suggestions.append("Switch to moderate mode if you trust this operation.")
            elif safety_level == SafetyLevel.MODERATE:
                suggestions.append(
                    "This command requires elevated privileges or modifies system state. "
                    "Proceed with caution and verify the command."
                )

        # Heuristics below only add notes, they never change the verdict
        if len(command) > MAX_COMMAND_LENGTH:
            warnings.append("Command is unusually long")
            suggestions.append("Consider breaking this into smaller commands.")

        if any(p.search(command) for p in _SUBSTITUTION_PATTERNS):
            warnings.append("Contains command substitution")
            if safety_level == SafetyLevel.STRICT:
                suggestions.append("Command substitution can execute arbitrary code.")

        blocked_rule_ids = tuple(rule.rule_id for rule in blocked_rules)
        if _SYSTEM_REDIRECT.search(command) and OVERWRITE_DISK not in blocked_rule_ids:
            warnings.append("Redirecting output to system path")
            suggestions.append("Verify the destination path is correct.")

        return SafetyVerdict(
            is_safe=is_safe,
            risk_level=risk_level,
            blocked_patterns=tuple(blocked_patterns),
            warnings=tuple(warnings),
            suggestions=tuple(suggestions),
            blocked_rule_ids=blocked_rule_ids
        )


_default_validator = SafetyValidator()


def validate_command(command: str, safety_level=SafetyLevel.MODERATE) -> SafetyVerdict:
    """Validate a command with the built-in pattern catalog."""
    return _default_validator.validate(command, safety_level)


def sanitize_for_display(command: str) -> str:
    """Mask passwords, tokens and keys before a command is shown or logged."""
    for pattern, replacement in _SECRET_PATTERNS:
        command = pattern.sub(replacement, command)
    return command
