"""
Data types passed between resolver stages
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import BINARY_EXTENSIONS, GITHUB_WEB_BASE


def is_binary_path(path: str) -> bool:
    """True if the path ends with a blocklisted binary extension"""
    lowered = path.lower()
    return any(lowered.endswith(ext) for ext in BINARY_EXTENSIONS)


@dataclass(frozen=True)
class RepositoryIdentity:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def html_url(self) -> str:
        return f"{GITHUB_WEB_BASE}/{self.owner}/{self.repo}"


@dataclass(frozen=True)
class TreeEntry:
    """One row of a recursive tree listing"""
    path: str
    type: str  # "blob" or "tree"

    @property
    def is_file(self) -> bool:
        return self.type == 'blob'

    @property
    def is_dir(self) -> bool:
        return self.type == 'tree'

    @classmethod
    def from_api(cls, item: dict) -> 'TreeEntry':
        return cls(path=item.get('path', ''), type=item.get('type', ''))


@dataclass(frozen=True)
class CandidateFile:
    path: str       # repo-relative, used to fetch
    filename: str   # bundle-relative name
    is_binary: bool = False

    @classmethod
    def from_path(cls, path: str, filename: str) -> 'CandidateFile':
        return cls(path=path, filename=filename, is_binary=is_binary_path(path))


@dataclass(frozen=True)
class SkillFile:
    filename: str
    content: str


@dataclass(frozen=True)
class SkillListing:
    """One offering in a multi-skill repository"""
    name: str
    path: str
    category: str

    def to_dict(self) -> dict:
        return {'name': self.name, 'path': self.path, 'category': self.category}


@dataclass
class CollectionResult:
    """Files gathered for one bundle; counts cover supporting files only"""
    supporting: List[SkillFile] = field(default_factory=list)
    attempted: int = 0
    manifest: Optional[SkillFile] = None

    @property
    def files(self) -> List[SkillFile]:
        """Bundle order: manifest first"""
        head = [self.manifest] if self.manifest is not None else []
        return head + self.supporting

    @property
    def collected(self) -> int:
        return len(self.supporting)

    def stats(self) -> dict:
        return {'attempted': self.attempted, 'collected': self.collected}
