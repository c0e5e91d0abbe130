"""
Parse user-supplied repository references
"""

import re

from .errors import MalformedReference
from .models import RepositoryIdentity

# Tried in order, first match wins
REFERENCE_PATTERNS = [
    re.compile(r'github\.com/([^/\s]+)/([^/?#\s]+)'),
    re.compile(r'github\.com/([^/\s]+)/([^/?#\s]+)\.git'),
    re.compile(r'^([^/\s]+)/([^/\s]+)$'),  # owner/repo shorthand
]

MALFORMED_MESSAGE = "Invalid GitHub URL format. Use: github.com/owner/repo or owner/repo"


def parse_reference(reference: str) -> RepositoryIdentity:
    """
    Turn a GitHub URL or "owner/repo" shorthand into a RepositoryIdentity.

    Examples:
        "octocat/Hello-World" -> octocat / Hello-World
        "https://github.com/octocat/Hello-World.git" -> octocat / Hello-World
        "github.com/octocat/Hello-World/tree/main/skills" -> octocat / Hello-World
    """
    reference = (reference or '').strip()

    for pattern in REFERENCE_PATTERNS:
        match = pattern.search(reference)
        if not match:
            continue
        owner = match.group(1).strip()
        repo = re.sub(r'\.git$', '', match.group(2).strip())
        if owner and repo:
            return RepositoryIdentity(owner=owner, repo=repo)
        break

    raise MalformedReference(MALFORMED_MESSAGE)
