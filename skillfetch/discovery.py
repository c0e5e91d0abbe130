"""
Tree discovery
Classify a recursive tree listing: single root skill, skills/ collection,
other named collections, or nothing.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import COLLECTION_ROOTS, MANIFEST_FILENAMES, SKILLS_ROOT
from .models import SkillListing, TreeEntry

ROOT_SKILL = 'root'
MULTIPLE_SKILLS = 'multiple'
NOT_FOUND = 'not_found'


@dataclass
class Discovery:
    kind: str
    manifest: Optional[str] = None
    skills: List[SkillListing] = field(default_factory=list)


def find_root_manifest(entries: Sequence[TreeEntry]) -> Optional[str]:
    """SKILL.md wins over README.md regardless of listing order"""
    root_files = {e.path for e in entries if e.is_file and '/' not in e.path}
    for filename in MANIFEST_FILENAMES:
        if filename in root_files:
            return filename
    return None


def child_directories(entries: Sequence[TreeEntry], root: str) -> List[str]:
    """Immediate subdirectory names under root, in listing order"""
    prefix = f"{root}/"
    names = {}
    for entry in entries:
        if not entry.is_dir or not entry.path.startswith(prefix):
            continue
        parts = entry.path.split('/')
        if len(parts) >= 2 and parts[1]:
            names.setdefault(parts[1], None)
    return list(names)


def list_collection(entries: Sequence[TreeEntry], root: str) -> List[SkillListing]:
    return [
        SkillListing(name=name, path=f"{root}/{name}", category=root)
        for name in child_directories(entries, root)
    ]


def find_collections(entries: Sequence[TreeEntry]) -> List[SkillListing]:
    """
    The skills/ root alone if it has any subdirectory; otherwise every
    other collection root merged into one listing.
    """
    skills = list_collection(entries, SKILLS_ROOT)
    if skills:
        return skills

    found = []
    for root in COLLECTION_ROOTS:
        found.extend(list_collection(entries, root))
    return found


def classify(entries: Sequence[TreeEntry]) -> Discovery:
    manifest = find_root_manifest(entries)
    if manifest:
        return Discovery(kind=ROOT_SKILL, manifest=manifest)

    skills = find_collections(entries)
    if skills:
        return Discovery(kind=MULTIPLE_SKILLS, skills=skills)

    return Discovery(kind=NOT_FOUND)
