"""Git state analysis, error knowledge base and recovery suggestions."""

from devhelper.git.analyzer import GitAnalyzer, RepositoryStatus, get_repository_status
from devhelper.git.knowledge import GitError, KnowledgeBase, match_error, match_state
from devhelper.git.recovery import RecoveryOption, generate_recovery_options

__all__ = [
    "GitAnalyzer",
    "GitError",
    "KnowledgeBase",
    "RecoveryOption",
    "RepositoryStatus",
    "generate_recovery_options",
    "get_repository_status",
    "match_error",
    "match_state",
]
