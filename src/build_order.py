"""Build-order resolution over the project dependency graph."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping

from common.logging_utils import extra_context, is_debug_enabled
from errors import CycleOrUnresolvable
from projects import PROJECTS, ProjectDescriptor

logger = logging.getLogger(__name__)


def _is_ready(descriptor: ProjectDescriptor, ordered: List[str]) -> bool:
    """A project is ready when every dependency group has a built member."""
    return all(any(dep in ordered for dep in group) for group in descriptor.deps)


def resolve_build_order(
    requested: Iterable[str],
    descriptors: Mapping[str, ProjectDescriptor] = PROJECTS,
) -> List[str]:
    """Sequence ``requested`` so that dependencies are built first.

    Works in whole passes: every project whose dependencies are satisfied by
    the projects ordered in earlier passes is appended, in request order,
    at the end of the pass.

    Raises:
        CycleOrUnresolvable: A pass made no progress, e.g. a dependency was
            never requested or the declarations are cyclic.
        KeyError: A requested project has no descriptor.
    """
    remaining: List[str] = []
    for name in requested:
        if name not in remaining:
            remaining.append(name)
    ordered: List[str] = []

    while remaining:
        ready = [name for name in remaining if _is_ready(descriptors[name], ordered)]
        if not ready:
            raise CycleOrUnresolvable(
                f"Unable to order projects {', '.join(remaining)}: "
                f"unsatisfied dependencies after {', '.join(ordered) or 'nothing'}"
            )
        if is_debug_enabled(logger):
            logger.debug(
                "Build order pass",
                extra=extra_context(event="build_order", component="build_order", action="pass", ready=",".join(ready)),
            )
        ordered.extend(ready)
        remaining = [name for name in remaining if name not in ready]

    return ordered
