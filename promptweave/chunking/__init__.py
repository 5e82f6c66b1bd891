"""
Message content chunking helpers.

This package provides ordered text/file chunking for message content, the
inline expression segmenter used by frontmatter and included files, and the
classification of chunks into provider-agnostic parts.
"""

from .content import ChunkParser, ChunkStream, parse_content
from .parts import PartClassifier, classify_file, classify_file_part, parse_message_parts
from .segments import Segment, parse_inline_segments

__all__ = [
    "ChunkParser",
    "ChunkStream",
    "parse_content",
    "PartClassifier",
    "classify_file",
    "classify_file_part",
    "parse_message_parts",
    "Segment",
    "parse_inline_segments",
]
