"""
Core system constants.

Basic constants used across multiple modules: reference syntax, MIME tables
and part classification sets.

Only place true invariants here (fixed syntax, lookup tables, bounds).
Deployment-specific values live in promptweave.settings.
"""

from __future__ import annotations

import string


# ==============================================================================
# Reference syntax
# ==============================================================================

# "@" then "./" or "../", any run of "." or "/", then a non-whitespace run.
# A ";type=<mime>" suffix is part of the non-whitespace run.
FILE_REFERENCE_PATTERN = r"@(\.\.?/[./]*\S+)"

# Splits "<path>;type=<mime>" into its two halves
MIME_OVERRIDE_PATTERN = r"^([^;]+);type=(.+)$"

# Inline expression delimiters (frontmatter and included text only)
EXPRESSION_PATTERN = r"\{\{(.*?)\}\}"

# Characters stripped from the end of a file reference
TRAILING_PUNCTUATION = string.punctuation

# Placeholder used in messages when no file path is known
UNKNOWN_SOURCE = "N/A"

# ==============================================================================
# MIME handling
# ==============================================================================

# Default external command for live MIME detection
DEFAULT_MIME_COMMAND = "file"

# Seconds to wait for the MIME detection command
DEFAULT_MIME_TIMEOUT = 5.0

# Image types that providers accept inline
SUPPORTED_IMAGE_MIME_TYPES = frozenset(
    {"image/jpeg", "image/png", "image/webp", "image/gif"}
)

PDF_MIME_TYPE = "application/pdf"

TEXT_MIME_PREFIX = "text/"

# Extension fallback tailored for chat attachments
MIME_BY_EXTENSION = {
    # Documentation & markup
    "txt": "text/plain",
    "md": "text/markdown",
    "markdown": "text/markdown",
    "rst": "text/x-rst",
    "org": "text/org",
    # Config & data
    "json": "application/json",
    "yaml": "application/yaml",
    "yml": "application/yaml",
    "toml": "application/toml",
    "xml": "application/xml",
    "csv": "text/csv",
    "sql": "application/sql",
    # Web frontend
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "scss": "text/x-scss",
    "sass": "text/x-sass",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "cjs": "application/javascript",
    "jsx": "text/jsx",
    "ts": "application/typescript",
    "tsx": "text/tsx",
    "vue": "text/x-vue",
    "svelte": "text/x-svelte",
    # Programming languages
    "py": "text/x-python",
    "rb": "text/x-ruby",
    "go": "text/x-go",
    "rs": "text/x-rust",
    "c": "text/x-c",
    "cpp": "text/x-c++",
    "cc": "text/x-c++",
    "cxx": "text/x-c++",
    "h": "text/x-c",
    "hpp": "text/x-c++",
    "java": "text/x-java",
    "kt": "text/x-kotlin",
    "swift": "text/x-swift",
    "php": "text/x-php",
    "sh": "text/x-shellscript",
    "bash": "text/x-shellscript",
    "zsh": "text/x-shellscript",
    "fish": "text/x-shellscript",
    "lua": "text/x-lua",
    "vim": "text/x-vim",
    "el": "text/x-emacs-lisp",
    "clj": "text/x-clojure",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "bmp": "image/bmp",
    # Documents
    "pdf": "application/pdf",
}

# ==============================================================================
# Frontmatter
# ==============================================================================

# Opening fence of a code-block frontmatter: ```<language>
FRONTMATTER_FENCE_PATTERN = r"^```(\w+)\s*$"

# Closing fence of a code-block frontmatter
FRONTMATTER_FENCE_CLOSE_PATTERN = r"^```\s*$"

# Delimiter for Obsidian-style YAML frontmatter
YAML_FRONTMATTER_DELIMITER = "---"
