"""
Resolver errors

Every fatal failure carries the HTTP status and the short message a caller
shows to the user.
"""

from typing import Dict, List, Optional


class ResolverError(Exception):
    """Base class for failures surfaced to the caller"""

    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {'error': self.message}


class MalformedReference(ResolverError):
    status = 400


class RepositoryNotFound(ResolverError):
    status = 404


class RateLimited(ResolverError):
    status = 429


class ManifestNotFound(ResolverError):
    status = 404


class MissingRequiredFields(ResolverError):
    """Manifest found but its frontmatter lacks required keys"""

    status = 400

    def __init__(self, missing_fields: List[str], meta: Optional[Dict[str, str]] = None,
                 manifest: str = 'SKILL.md'):
        super().__init__(
            f"{manifest} found, but is missing required frontmatter fields: "
            f"{', '.join(missing_fields)}"
        )
        self.missing_fields = list(missing_fields)
        self.meta = dict(meta or {})

    def to_payload(self) -> dict:
        return {
            'error': self.message,
            'validated': False,
            'meta': self.meta,
            'missingFields': self.missing_fields,
        }


class UnexpectedFailure(ResolverError):
    status = 500
