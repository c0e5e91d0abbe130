"""
Resolver configuration
"""

import os

# GitHub endpoints
GITHUB_API_BASE = "https://api.github.com"
GITHUB_RAW_BASE = "https://raw.githubusercontent.com"
GITHUB_WEB_BASE = "https://github.com"

# GitHub token for higher rate limits (optional)
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN", "")

USER_AGENT = "Skills-Plane-Resolver/1.0"

# Seconds per outbound call
REQUEST_TIMEOUT = 15

# Manifest files, in order of preference
MANIFEST_FILENAMES = ["SKILL.md", "README.md"]

# The lightweight validation check only accepts this one
VALIDATION_MANIFEST = "SKILL.md"

REQUIRED_FIELDS = ["name", "description"]

# Probed when repository metadata is unavailable
PROBE_BRANCHES = ["main", "master"]
DEFAULT_BRANCH = "main"

# Collection roots
SKILLS_ROOT = "skills"
COLLECTION_ROOTS = ["rules", "workflows", "scripts", "references"]

# skillPath value that merges every skill under SKILLS_ROOT
ALL_SKILLS = "__ALL__"

BINARY_EXTENSIONS = [
    # archives
    ".zip", ".jar", ".tar", ".gz",
    # images
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico",
    # documents and executables
    ".pdf", ".exe", ".bin",
    # fonts
    ".woff", ".woff2", ".ttf", ".eot",
]

# Skipped when collecting a skill rooted at the repository root
ROOT_EXCLUDED_DIRS = [".github/", "packages/", "node_modules/", "dist/", "build/", "skills/"]

# Volume bounds
MAX_SKILL_FILES = 50
MAX_MERGED_FILES = 100

# Directory walker fallback
MAX_WALK_DEPTH = 8

# Service defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
FETCH_ROUTE = "/api/v1/skills/fetch-github"

# Request payload schema
REQUEST_SCHEMA = {
    "type": "object",
    "properties": {
        "githubUrl": {"type": "string", "minLength": 1},
        "skillPath": {"type": ["string", "null"]},
        "validateOnly": {"type": ["boolean", "null"]},
    },
    "required": ["githubUrl"],
}
