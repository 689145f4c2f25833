"""Dangerous and warning command patterns used by the safety validator."""

import re
from typing import Tuple

from .models import PatternRule

OVERWRITE_DISK = "overwrite_disk"


def _rule(rule_id: str, pattern: str, description: str) -> PatternRule:
    return PatternRule(rule_id=rule_id, pattern=re.compile(pattern), description=description)


# DANGEROUS patterns - commands matching any of these are never executed
DANGEROUS_RULES: Tuple[PatternRule, ...] = (
    _rule("rm_rf_root", r'rm\s+-rf\s+/', "Recursive force delete from root"),
    _rule("rm_rf_all", r'rm\s+-rf\s+\*', "Recursive force delete all"),
    _rule("sudo_rm", r'sudo\s+rm', "Sudo remove command"),
    _rule("fork_bomb", r':\(\)\{\s*:\|:&\s*\};:', "Fork bomb"),
    _rule("mkfs", r'mkfs\.', "Format filesystem"),
    _rule("dd_to_device", r'dd\s+if=.*of=/dev/', "Direct disk write"),
    _rule(OVERWRITE_DISK, r'>\s*/dev/sda', "Overwrite disk"),
    _rule("chmod_777_root", r'chmod\s+-R\s+777\s+/', "Dangerous permissions change"),
    _rule("curl_pipe_bash", r'curl.*\|\s*bash', "Pipe curl to bash"),
    _rule("wget_pipe_sh", r'wget.*\|\s*sh', "Pipe wget to shell"),
    _rule("shutdown", r'shutdown', "System shutdown"),
    _rule("reboot", r'reboot', "System reboot"),
    _rule("halt", r'init\s+0', "System halt"),
)

# WARNING patterns - flagged, blocked only in strict mode
WARNING_RULES: Tuple[PatternRule, ...] = (
    _rule("sudo", r'sudo', "Elevated privileges required"),
    _rule("rm_recursive", r'rm\s+-r', "Recursive deletion"),
    _rule("chmod", r'chmod', "Permission modification"),
    _rule("chown", r'chown', "Ownership modification"),
    _rule("kill_9", r'kill\s+-9', "Force kill process"),
    _rule("pkill", r'pkill', "Process termination"),
    _rule("mv_to_path", r'mv\s+.*\/', "Moving files to system directory"),
)
