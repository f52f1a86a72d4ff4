# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Dependency graph between resource modules."""

import logging
from collections.abc import Mapping

from src.permissions.exceptions import DependencyGraphError
from src.permissions.modules import ALL_MODULES, MODULE_DEPENDENCIES, Module

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Immutable module dependency graph with precomputed closures.

    A module's parents are the modules it structurally requires: viewing
    beds is meaningless without viewing the room, floor and building they
    belong to. Children are the inverse relation. Transitive ancestors and
    descendants are computed once at construction so the normalizer never
    re-walks the graph.
    """

    def __init__(
        self,
        dependencies: Mapping[Module, tuple[Module, ...] | list[Module]],
        modules: tuple[Module, ...] = ALL_MODULES,
    ) -> None:
        """Build and validate the graph.

        Args:
            dependencies: Mapping of module to the modules it depends on
            modules: Closed set of modules the graph must cover

        Raises:
            DependencyGraphError: If a module is undeclared, a parent is
                unknown or the declaration contains a cycle
        """
        self._modules = tuple(modules)
        known = set(self._modules)

        missing = [m for m in self._modules if m not in dependencies]
        if missing:
            raise DependencyGraphError(
                f"Modules without a dependency declaration: {[m.value for m in missing]}"
            )

        parents: dict[Module, tuple[Module, ...]] = {}
        for module, declared in dependencies.items():
            if module not in known:
                raise DependencyGraphError(f"Unknown module in graph: {module!r}")
            for parent in declared:
                if parent not in known:
                    raise DependencyGraphError(
                        f"Module {module.value} depends on unknown module {parent!r}"
                    )
            # keep declaration order, drop duplicates
            parents[module] = tuple(dict.fromkeys(declared))

        children: dict[Module, set[Module]] = {m: set() for m in self._modules}
        for module, declared in parents.items():
            for parent in declared:
                children[parent].add(module)

        self._parents = parents
        self._children = {m: frozenset(c) for m, c in children.items()}
        self._check_acyclic()
        self._ancestors = {m: self._closure(m, self._parents) for m in self._modules}
        self._descendants = {
            m: self._closure(m, self._children) for m in self._modules
        }
        logger.debug(
            f"Built dependency graph with {len(self._modules)} modules, "
            f"roots: {[m.value for m in self.roots()]}"
        )

    def _check_acyclic(self) -> None:
        """Depth-first search for back edges."""
        visiting: set[Module] = set()
        done: set[Module] = set()

        def visit(module: Module, path: list[Module]) -> None:
            if module in done:
                return
            if module in visiting:
                cycle = path[path.index(module):] + [module]
                raise DependencyGraphError(
                    "Cyclic module dependency: "
                    + " -> ".join(m.value for m in cycle)
                )
            visiting.add(module)
            for parent in self._parents[module]:
                visit(parent, path + [module])
            visiting.discard(module)
            done.add(module)

        for module in self._modules:
            visit(module, [])

    def _closure(
        self,
        start: Module,
        edges: Mapping[Module, tuple[Module, ...] | frozenset[Module]],
    ) -> frozenset[Module]:
        seen: set[Module] = set()
        stack = list(edges[start])
        while stack:
            module = stack.pop()
            if module in seen:
                continue
            seen.add(module)
            stack.extend(edges[module])
        return frozenset(seen)

    @property
    def modules(self) -> tuple[Module, ...]:
        """All modules covered by the graph, in canonical order."""
        return self._modules

    def parents_of(self, module: Module) -> tuple[Module, ...]:
        """Direct dependencies of a module (empty for roots)."""
        return self._parents[module]

    def children_of(self, module: Module) -> frozenset[Module]:
        """Modules that directly depend on a module."""
        return self._children[module]

    def ancestors_of(self, module: Module) -> frozenset[Module]:
        """Transitive closure of parents_of."""
        return self._ancestors[module]

    def descendants_of(self, module: Module) -> frozenset[Module]:
        """Transitive closure of children_of."""
        return self._descendants[module]

    def roots(self) -> tuple[Module, ...]:
        """Modules without parents, in canonical order."""
        return tuple(m for m in self._modules if not self._parents[m])


DEPENDENCY_GRAPH = DependencyGraph(MODULE_DEPENDENCIES)
