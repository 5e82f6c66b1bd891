"""Restricted execution environment for frontmatter code and inline expressions.

Code runs inside an asteval interpreter whose symbol table is the
environment's binding scope. The symbol table starts with asteval's safe
builtins (minus file access) plus a small curated set of string, numeric and
path helpers. Import statements are rejected before execution.

Reserved fields live on the Environment object rather than in the symbol
table:
    filename  - current file path, for error reporting and path resolution
    dirname   - directory containing the current file
"""

from __future__ import annotations

import ast
import json
import math
import os
import re
from types import SimpleNamespace
from typing import Any, Dict, Iterator, Optional, Tuple

from asteval import Interpreter

from promptweave.chunking.content import is_readable_file
from promptweave.constants import UNKNOWN_SOURCE
from promptweave.errors import EvaluationError, ExecutionError, IncludeError, LoadError
from promptweave.logger import UnifiedLogger
from promptweave.utils.mime import MimeResolver, get_default_mime_resolver

from .include import IncludeResolver, install_include

logger = UnifiedLogger(tag="sandbox")

# asteval symbols removed from every environment
_REMOVED_SYMBOLS = ("open",)

_PATH_HELPERS = SimpleNamespace(
    join=os.path.join,
    dirname=os.path.dirname,
    basename=os.path.basename,
    splitext=os.path.splitext,
    normpath=os.path.normpath,
    abspath=os.path.abspath,
    isfile=is_readable_file,
)

_JSON_HELPERS = SimpleNamespace(dumps=json.dumps, loads=json.loads)

_REGEX_HELPERS = SimpleNamespace(
    match=re.match,
    search=re.search,
    fullmatch=re.fullmatch,
    findall=re.findall,
    sub=re.sub,
    split=re.split,
    escape=re.escape,
)

_SAFE_SYMBOLS: Dict[str, Any] = {
    "math": math,
    "json": _JSON_HELPERS,
    "re": _REGEX_HELPERS,
    "path": _PATH_HELPERS,
}


class Environment:
    """Name-binding scope plus reserved path fields and the include capability.

    Owned by the evaluation call that created it. Never shared between
    sibling or nested includes.
    """

    def __init__(
        self,
        interpreter: Interpreter,
        filename: Optional[str] = None,
        dirname: Optional[str] = None,
        mime_resolver: Optional[MimeResolver] = None,
    ):
        self.interpreter = interpreter
        self.filename = filename
        self.dirname = dirname
        self.mime_resolver = mime_resolver or get_default_mime_resolver()
        self.include: Optional[IncludeResolver] = None

    @property
    def bindings(self) -> Dict[str, Any]:
        return self.interpreter.symtable

    def __getitem__(self, name: str) -> Any:
        return self.bindings[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.bindings[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def get(self, name: str, default: Any = None) -> Any:
        return self.bindings.get(name, default)

    def update(self, values: Dict[str, Any]) -> None:
        self.bindings.update(values)

    @property
    def display_name(self) -> str:
        return self.filename or UNKNOWN_SOURCE


def _new_interpreter() -> Interpreter:
    interpreter = Interpreter(use_numpy=False)
    for name in _REMOVED_SYMBOLS:
        interpreter.symtable.pop(name, None)
    interpreter.symtable.update(_SAFE_SYMBOLS)
    return interpreter


def create_environment(
    filename: Optional[str] = None,
    *,
    mime_resolver: Optional[MimeResolver] = None,
) -> Environment:
    """Return a fresh environment exposing only the curated capability set."""
    dirname = os.path.dirname(os.path.abspath(filename)) if filename else None
    return Environment(
        _new_interpreter(),
        filename=filename,
        dirname=dirname,
        mime_resolver=mime_resolver,
    )


def ensure_capabilities(env: Environment) -> None:
    """Install include() on ``env`` if it is not there yet."""
    if env.include is not None:
        return
    initial_stack: Tuple[str, ...] = ()
    if env.filename:
        initial_stack = (os.path.abspath(env.filename),)
    install_include(
        env,
        initial_stack,
        evaluate=eval_expression,
        create_env=create_environment,
    )


def _first_fault(interpreter: Interpreter) -> Tuple[Optional[BaseException], str]:
    """Return the original exception (when recoverable) and a readable message."""
    holder = interpreter.error[0]
    exc_info = getattr(holder, "exc_info", None)
    original = exc_info[1] if exc_info else None
    if original is not None:
        return original, f"{type(original).__name__}: {original}"
    exc_name = getattr(holder.exc, "__name__", "Error")
    return None, f"{exc_name}: {holder.msg}"


def _check_script(code: str, filename: str) -> None:
    try:
        tree = ast.parse(code, filename=filename, mode="exec")
    except SyntaxError as exc:
        raise LoadError(
            f"Load error in frontmatter of '{filename}': {exc.msg} (line {exc.lineno})",
            filename=filename,
        ) from exc

    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            raise LoadError(
                f"Load error in frontmatter of '{filename}': import statements are not available (line {node.lineno})",
                filename=filename,
            )


def execute(code: str, env: Optional[Environment] = None) -> Dict[str, Any]:
    """
    Execute a block of statements and return the names it bound.

    Args:
        code: Statements to execute
        env: Environment to run in; a fresh one is created when omitted

    Returns:
        Mapping of names that were not bound before execution

    Raises:
        LoadError: If the code does not compile against the capability set
        ExecutionError: If the code fails at runtime
    """
    env = env if env is not None else create_environment()
    ensure_capabilities(env)
    filename = env.display_name

    _check_script(code, filename)

    initial_keys = set(env.bindings)
    env.interpreter.eval(code, show_errors=False)
    if env.interpreter.error:
        original, message = _first_fault(env.interpreter)
        raise ExecutionError(
            f"Execution error in frontmatter of '{filename}': {message}",
            filename=filename,
        ) from original

    return {
        name: value
        for name, value in env.bindings.items()
        if name not in initial_keys
    }


def eval_expression(expr: str, env: Environment) -> Any:
    """
    Evaluate a single expression in ``env`` and return its value.

    Raises:
        IncludeError: Re-raised unchanged when include() failed
        EvaluationError: For parse errors and any other runtime fault
    """
    ensure_capabilities(env)
    filename = env.display_name
    source = expr.strip()
    shown = "{{" + expr + "}}"

    try:
        ast.parse(source, mode="eval")
    except SyntaxError as exc:
        raise EvaluationError(
            f"Parse error in '{filename}' for expression '{shown}': {exc.msg}",
            filename=filename,
            expression=expr,
        ) from exc

    result = env.interpreter.eval(source, show_errors=False)
    if env.interpreter.error:
        original, message = _first_fault(env.interpreter)
        if isinstance(original, IncludeError):
            raise original
        logger.debug(
            "Expression failed in {filename}: {error}",
            filename=filename,
            error=message,
        )
        raise EvaluationError(
            f"Evaluation error in '{filename}' for expression '{shown}': {message}",
            filename=filename,
            expression=expr,
        ) from original

    return result
