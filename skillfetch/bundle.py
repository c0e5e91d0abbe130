"""
Bundle serialization

Each file is written as

    --- FILE: <filename> (<n> chars) ---
    <content>
    --- END FILE ---

and files are separated by one blank line. The character count lets a
reader split the bundle without trusting the delimiter lines, so file
content may itself contain them.
"""

import re
from typing import Iterable, List

from .models import SkillFile

HEADER_RE = re.compile(r'--- FILE: (.+) \((\d+) chars\) ---\n')
FOOTER = '\n--- END FILE ---\n'
SEPARATOR = '\n'


def serialize_file(skill_file: SkillFile) -> str:
    return (
        f"--- FILE: {skill_file.filename} ({len(skill_file.content)} chars) ---\n"
        f"{skill_file.content}{FOOTER}"
    )


def serialize_bundle(files: Iterable[SkillFile]) -> str:
    """Same ordered input always gives the same text"""
    return SEPARATOR.join(serialize_file(f) for f in files)


class BundleFormatError(ValueError):
    pass


def split_bundle(text: str) -> List[SkillFile]:
    """Inverse of serialize_bundle"""
    files = []
    pos = 0
    while pos < len(text):
        match = HEADER_RE.match(text, pos)
        if not match:
            raise BundleFormatError(f"Expected file header at offset {pos}")
        start = match.end()
        end = start + int(match.group(2))
        if not text.startswith(FOOTER, end):
            raise BundleFormatError(f"Missing end marker for {match.group(1)}")
        files.append(SkillFile(filename=match.group(1), content=text[start:end]))
        pos = end + len(FOOTER)
        if text.startswith(SEPARATOR, pos):
            pos += len(SEPARATOR)
    return files
