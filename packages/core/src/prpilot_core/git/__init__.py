from prpilot_core.git.models import ChangeSummary, CommitRecord, FileDelta
from prpilot_core.git.repository import GitRepository, find_git_root

__all__ = ["ChangeSummary", "CommitRecord", "FileDelta", "GitRepository", "find_git_root"]
