"""Internal components for repository reads - not part of public API."""

from gitver.git._internal.access import RepoAccess
from gitver.git._internal.errors import ErrorMapper, git_operation
from gitver.git._internal.parsing import extract_branch_name, extract_tag_name

__all__ = [
    "ErrorMapper",
    "RepoAccess",
    "extract_branch_name",
    "extract_tag_name",
    "git_operation",
]
