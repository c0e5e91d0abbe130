# GitHub Skill Resolver
# Locates SKILL.md skills in GitHub repositories and bundles their files

from .bundle import serialize_bundle, split_bundle
from .reference import parse_reference
from .resolver import SkillResolver

__all__ = ['SkillResolver', 'parse_reference', 'serialize_bundle', 'split_bundle']
