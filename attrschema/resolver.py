"""Dependency resolution for conditional requirements.

A ``required_if`` rule asks about a *different* field of the document being
validated, for instance "``end_date`` is required when ``status`` is
``'closed'``".  Answering that needs the whole document, so one
``DependencyResolver`` is bound to the root value of each top-level
``validate()`` call and handed down the validation call tree.

The binding lives in a :class:`contextvars.ContextVar`, which makes it local
to the current thread and asyncio task: independent validations running
concurrently never see each other's documents.  Re-entrant ``validate`` calls
made during the same top-level validation reuse the bound resolver::

    with DependencyResolver.bind(document) as resolver:
        errors = attribute.validate(document, resolver=resolver)
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from attrschema import paths

logger = logging.getLogger(__name__)

_current: ContextVar[DependencyResolver | None] = ContextVar(
    "attrschema_dependency_resolver", default=None
)


class DependencyResolver:
    """Answers cross-field dependency queries against one document.

    Args:
        root: The loaded root value being validated.
        root_context: Context path naming ``root`` (``"$"`` by default).
    """

    def __init__(self, root: Any, root_context: str = paths.DEFAULT_ROOT_CONTEXT) -> None:
        self.root = root
        self.root_context = root_context

    # ------------------------------------------------------------------
    # Scope management
    # ------------------------------------------------------------------

    @classmethod
    def current(cls) -> DependencyResolver | None:
        """Return the resolver bound in the current execution context."""
        return _current.get()

    @classmethod
    @contextmanager
    def bind(
        cls, root: Any, root_context: str = paths.DEFAULT_ROOT_CONTEXT
    ) -> Iterator[DependencyResolver]:
        """Bind a fresh resolver for ``root`` until the block exits.

        The previous binding (if any) is restored afterwards.
        """
        resolver = cls(root, root_context)
        token = _current.set(resolver)
        logger.debug("Bound dependency resolver at %s", root_context)
        try:
            yield resolver
        finally:
            _current.reset(token)
            logger.debug("Released dependency resolver at %s", root_context)

    @classmethod
    @contextmanager
    def scope(
        cls,
        root: Any,
        root_context: str = paths.DEFAULT_ROOT_CONTEXT,
        resolver: DependencyResolver | None = None,
    ) -> Iterator[DependencyResolver]:
        """Yield ``resolver``, the active resolver, or a new binding for ``root``.

        Used by every ``validate`` entry point: only the outermost call of a
        validation tree binds ``root``.
        """
        active = resolver or cls.current()
        if active is not None:
            yield active
            return
        with cls.bind(root, root_context) as bound:
            yield bound

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve_path(self, context_path: str, key_path: str) -> str:
        """Return the absolute path of ``key_path`` seen from ``context_path``."""
        if paths.is_absolute(key_path):
            return key_path
        return paths.join(context_path, key_path)

    def query(self, path: str) -> Any:
        """Return the value at ``path`` in the bound document, or ``None``."""
        segments = self._segments(path)
        if segments is None:
            return None
        node = self.root
        for segment in segments:
            node = _step(node, segment)
            if node is None:
                return None
        return node

    def check(self, context_path: str, key_path: str, predicate: Any = None) -> bool:
        """Return whether the node at ``key_path`` satisfies ``predicate``.

        Args:
            context_path: Context the (relative) ``key_path`` is resolved
                against: the parent of the attribute being validated.
            key_path: Absolute or relative path of the referenced node.
            predicate: ``None`` (node must be present), a literal (equality),
                a compiled regex (``search`` on a string node) or a callable.
        """
        path = self.resolve_path(context_path, key_path)
        node = self.query(path)
        logger.debug("Dependency %s resolved to %r", path, node)
        if node is None:
            return False
        if predicate is None:
            return True
        if isinstance(predicate, re.Pattern):
            return isinstance(node, str) and predicate.search(node) is not None
        if callable(predicate):
            return bool(predicate(node))
        return node == predicate

    def _segments(self, path: str) -> list[str] | None:
        prefix = self.root_context + paths.SEPARATOR
        if path == self.root_context:
            return []
        if path.startswith(prefix):
            return paths.split(path[len(prefix):])
        if paths.is_absolute(path):
            return paths.split(path)[1:]
        return None


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(segment)
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        try:
            return node[int(segment)]
        except (ValueError, IndexError):
            return None
    return None
