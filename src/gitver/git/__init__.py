"""Repository access for version calculation."""

from gitver.git.facade import RepositoryFacade
from gitver.git.models import Signature, TagRef
from gitver.git.repository import GitRepository

__all__ = [
    # Main class
    "GitRepository",
    "RepositoryFacade",
    # Models
    "Signature",
    "TagRef",
]
