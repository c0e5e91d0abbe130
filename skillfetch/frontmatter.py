"""
Manifest frontmatter parser
Extracts the key/value header block from SKILL.md / README.md files
"""

import re
import datetime
from typing import Dict, List, Optional

import yaml

from .config import REQUIRED_FIELDS

FRONTMATTER_RE = re.compile(r'^---\r?\n([\s\S]+?)\r?\n---')


def _to_text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ', '.join(_to_text(v) for v in value if v is not None)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value).strip()


def _parse_lines(block: str, top_level: bool = False) -> Dict[str, str]:
    """Plain "key: value" split, as written in the block"""
    meta = {}
    for line in block.split('\n'):
        if top_level and line[:1] in (' ', '\t'):
            continue
        key, sep, value = line.partition(':')
        key = key.strip()
        if sep and key:
            meta[key] = value.strip()
    return meta


def _as_written(value, raw: Optional[str]):
    """Raw text where YAML read null or cut a trailing " #..." comment"""
    if raw is None:
        return value
    if value is None:
        return raw
    if isinstance(value, str) and ' #' in raw and raw.startswith(value):
        return raw
    return value


def parse_frontmatter(content: str) -> Dict[str, str]:
    """
    Extract the frontmatter block between leading "---" lines.

    Values are always strings. Nested mappings are dropped, lists are
    joined with ", ". Unquoted colons inside values ("description: Use
    when: ...") break YAML, so such blocks are re-read line by line.
    Scalars keep their written text where YAML would lose it:
    "description: Handles #tags" stays "Handles #tags", "alias: ~"
    stays "~".
    """
    match = FRONTMATTER_RE.match(content or '')
    if not match:
        return {}

    block = match.group(1)
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError:
        return _parse_lines(block)

    if not isinstance(data, dict):
        return _parse_lines(block)

    raw = _parse_lines(block, top_level=True)
    meta = {}
    for key, value in data.items():
        if isinstance(value, dict):
            continue
        meta[str(key)] = _to_text(_as_written(value, raw.get(str(key))))
    return meta


def missing_fields(meta: Dict[str, str], required: List[str] = None) -> List[str]:
    """Required keys absent or empty in meta, in declaration order"""
    required = REQUIRED_FIELDS if required is None else required
    return [key for key in required if not meta.get(key)]
