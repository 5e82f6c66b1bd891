"""
Sandboxed evaluation of frontmatter code and inline expressions.

This package provides the restricted environment, the include() capability
and the emit protocol used to turn expression results into parts.
"""

from .emittable import BinaryIncludePart, CompositeIncludePart, EmitBuilder, Emittable
from .include import IncludeResolver, install_include
from .sandbox import (
    Environment,
    create_environment,
    ensure_capabilities,
    eval_expression,
    execute,
)

__all__ = [
    "BinaryIncludePart",
    "CompositeIncludePart",
    "EmitBuilder",
    "Emittable",
    "IncludeResolver",
    "install_include",
    "Environment",
    "create_environment",
    "ensure_capabilities",
    "eval_expression",
    "execute",
]
