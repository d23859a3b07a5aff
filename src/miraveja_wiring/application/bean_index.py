"""Application layer - In-memory bean index."""

import threading
from typing import Dict, Iterable, List, Optional, Set, Tuple

import structlog

from miraveja_wiring.domain import (
    BeanDefinition,
    BeanInjectionPoint,
    IBeanIndex,
    IndexStats,
    normalize_type_name,
    simple_type_name,
    sort_by_location,
)

log = structlog.get_logger(__name__)

DeclarationEntries = Tuple[List[BeanDefinition], List[BeanInjectionPoint]]


def _add_key(mapping: Dict[str, Set[str]], lookup: str, key: str) -> None:
    mapping.setdefault(lookup, set()).add(key)


def _discard_key(mapping: Dict[str, Set[str]], lookup: str, key: str) -> None:
    keys = mapping.get(lookup)
    if keys is None:
        return
    keys.discard(key)
    if not keys:
        del mapping[lookup]


class BeanIndex(IBeanIndex):
    """Multi-key index over bean definitions and injection points.

    Definitions and injection points are identified by their location key.
    Type lookups go through two parallel mappings, one keyed by normalized
    fully-qualified name and one by trailing simple name, so a simple-name
    query finds fully-qualified definitions and the reverse. Matching policy
    lives in the resolver; the index only returns candidate supersets.

    Every public method runs under one re-entrant lock, so grouped
    replacements are never observed half-applied.

    Attributes:
        _definitions: Definitions by location key.
        _by_type: Definition keys by normalized type (own type and implemented interfaces).
        _by_simple_name: Definition keys by simple type name.
        _by_name: Definition keys by bean name.
        _by_qualifier: Definition keys by qualifier.
        _injections: Injection points by location key.
        _injections_by_simple_name: Injection point keys by simple requested type name.
        _declarations: Definition and injection point keys grouped by declaration key.
        _generation: Incremented on every mutation.
    """

    def __init__(self) -> None:
        """Initialize an empty index."""
        self._lock = threading.RLock()
        self._definitions: Dict[str, BeanDefinition] = {}
        self._by_type: Dict[str, Set[str]] = {}
        self._by_simple_name: Dict[str, Set[str]] = {}
        self._by_name: Dict[str, Set[str]] = {}
        self._by_qualifier: Dict[str, Set[str]] = {}
        self._injections: Dict[str, BeanInjectionPoint] = {}
        self._injections_by_simple_name: Dict[str, Set[str]] = {}
        self._declarations: Dict[str, Set[str]] = {}
        self._generation = 0

    # Definitions

    def _insert_definition(self, definition: BeanDefinition) -> None:
        key = definition.location_key
        if key in self._definitions:
            self._delete_definition(key)
        self._definitions[key] = definition
        for type_name in definition.provided_types:
            _add_key(self._by_type, normalize_type_name(type_name), key)
            _add_key(self._by_simple_name, simple_type_name(type_name), key)
        _add_key(self._by_name, definition.name, key)
        for qualifier in definition.qualifiers:
            _add_key(self._by_qualifier, qualifier, key)

    def _delete_definition(self, key: str) -> Optional[BeanDefinition]:
        definition = self._definitions.pop(key, None)
        if definition is None:
            return None
        for type_name in definition.provided_types:
            _discard_key(self._by_type, normalize_type_name(type_name), key)
            _discard_key(self._by_simple_name, simple_type_name(type_name), key)
        _discard_key(self._by_name, definition.name, key)
        for qualifier in definition.qualifiers:
            _discard_key(self._by_qualifier, qualifier, key)
        return definition

    def add_definition(self, definition: BeanDefinition) -> None:
        """Insert a definition, replacing any definition at the same location.

        Args:
            definition: The definition to index.

        Example:
            >>> index = BeanIndex()
            >>> index.add_definition(stripe_payment_service)
            >>> index.get_definition(stripe_payment_service.location_key) is stripe_payment_service
            True
        """
        with self._lock:
            self._insert_definition(definition)
            self._generation += 1
        log.debug("bean_index.definition_added", name=definition.name, type=definition.type)

    def remove_definition(self, location_key: str) -> Optional[BeanDefinition]:
        """Remove the definition anchored at a location.

        Args:
            location_key: Location key of the definition.

        Returns:
            The removed definition, or ``None`` if nothing was indexed there.
        """
        with self._lock:
            removed = self._delete_definition(location_key)
            if removed is not None:
                self._generation += 1
        if removed is not None:
            log.debug("bean_index.definition_removed", name=removed.name, location=location_key)
        return removed

    def get_definition(self, location_key: str) -> Optional[BeanDefinition]:
        with self._lock:
            return self._definitions.get(location_key)

    def _collect(self, keys: Iterable[str]) -> List[BeanDefinition]:
        return sort_by_location(self._definitions[key] for key in keys)

    def find_candidates(self, injection: BeanInjectionPoint) -> List[BeanDefinition]:
        """Return every definition whose type could satisfy the injection.

        The result is the superset of definitions sharing the injection's
        simple type name through their own type or an implemented interface,
        which covers exact, simple-to-qualified and qualified-to-simple
        matches. No ranking or qualifier/name filtering is applied.

        Args:
            injection: The injection point being resolved.

        Returns:
            Candidate definitions ordered by source location.
        """
        with self._lock:
            keys = set(self._by_type.get(normalize_type_name(injection.bean_type), ()))
            keys.update(self._by_simple_name.get(injection.simple_type_name, ()))
            return self._collect(keys)

    def find_by_type(self, type_name: str) -> List[BeanDefinition]:
        """Return definitions providing exactly the given normalized type name."""
        with self._lock:
            return self._collect(self._by_type.get(normalize_type_name(type_name), ()))

    def find_by_simple_name(self, type_name: str) -> List[BeanDefinition]:
        with self._lock:
            return self._collect(self._by_simple_name.get(simple_type_name(type_name), ()))

    def find_by_name(self, name: str) -> List[BeanDefinition]:
        """Return definitions with the given bean name; names are not unique."""
        with self._lock:
            return self._collect(self._by_name.get(name, ()))

    def find_by_qualifier(self, qualifier: str) -> List[BeanDefinition]:
        with self._lock:
            return self._collect(self._by_qualifier.get(qualifier, ()))

    def all_definitions(self) -> List[BeanDefinition]:
        with self._lock:
            return sort_by_location(self._definitions.values())

    # Injection points

    def _insert_injection_point(self, injection: BeanInjectionPoint) -> None:
        key = injection.location_key
        if key in self._injections:
            self._delete_injection_point(key)
        self._injections[key] = injection
        _add_key(self._injections_by_simple_name, injection.simple_type_name, key)

    def _delete_injection_point(self, key: str) -> Optional[BeanInjectionPoint]:
        injection = self._injections.pop(key, None)
        if injection is None:
            return None
        _discard_key(self._injections_by_simple_name, injection.simple_type_name, key)
        return injection

    def add_injection_point(self, injection: BeanInjectionPoint) -> None:
        """Insert an injection point, replacing any injection point at the same location."""
        with self._lock:
            self._insert_injection_point(injection)
            self._generation += 1

    def remove_injection_point(self, location_key: str) -> Optional[BeanInjectionPoint]:
        with self._lock:
            removed = self._delete_injection_point(location_key)
            if removed is not None:
                self._generation += 1
            return removed

    def get_injection_point(self, location_key: str) -> Optional[BeanInjectionPoint]:
        with self._lock:
            return self._injections.get(location_key)

    def find_injection_candidates(self, definition: BeanDefinition) -> List[BeanInjectionPoint]:
        """Return every injection point the definition could plausibly satisfy.

        This is the inverse of :meth:`find_candidates`: injection points
        requesting one of the simple type names the definition provides.
        Precise filtering is left to the resolver.

        Args:
            definition: The definition being navigated from.

        Returns:
            Injection points ordered by source location.
        """
        with self._lock:
            keys: Set[str] = set()
            for simple_name in definition.simple_names:
                keys.update(self._injections_by_simple_name.get(simple_name, ()))
            return sort_by_location(self._injections[key] for key in keys)

    def all_injection_points(self) -> List[BeanInjectionPoint]:
        with self._lock:
            return sort_by_location(self._injections.values())

    # Grouped mutation

    def _delete_declaration(self, declaration_key: str) -> None:
        for key in self._declarations.pop(declaration_key, ()):
            self._delete_definition(key)
            self._delete_injection_point(key)

    def _insert_declaration(
        self,
        declaration_key: str,
        definitions: Iterable[BeanDefinition],
        injection_points: Iterable[BeanInjectionPoint],
    ) -> None:
        keys = self._declarations.setdefault(declaration_key, set())
        for definition in definitions:
            self._insert_definition(definition)
            keys.add(definition.location_key)
        for injection in injection_points:
            self._insert_injection_point(injection)
            keys.add(injection.location_key)
        if not keys:
            del self._declarations[declaration_key]

    def replace_declaration(
        self,
        declaration_key: str,
        definitions: Iterable[BeanDefinition],
        injection_points: Iterable[BeanInjectionPoint],
    ) -> None:
        """Atomically swap everything produced by one source declaration.

        Args:
            declaration_key: Location key of the declaration.
            definitions: Definitions the declaration now yields.
            injection_points: Injection points the declaration now yields.
        """
        with self._lock:
            self._delete_declaration(declaration_key)
            self._insert_declaration(declaration_key, definitions, injection_points)
            self._generation += 1

    def remove_declaration(self, declaration_key: str) -> None:
        """Remove everything produced by one source declaration."""
        with self._lock:
            self._delete_declaration(declaration_key)
            self._generation += 1

    def _delete_file(self, uri: str) -> None:
        for key, definition in list(self._definitions.items()):
            if definition.location.uri == uri:
                self._delete_definition(key)
        for key, injection in list(self._injections.items()):
            if injection.location.uri == uri:
                self._delete_injection_point(key)
        for declaration_key, keys in list(self._declarations.items()):
            remaining = {key for key in keys if key in self._definitions or key in self._injections}
            if remaining:
                self._declarations[declaration_key] = remaining
            else:
                del self._declarations[declaration_key]

    def remove_file(self, uri: str) -> None:
        """Remove every definition and injection point located in a file."""
        with self._lock:
            self._delete_file(uri)
            self._generation += 1
        log.debug("bean_index.file_removed", uri=uri)

    def replace_file(self, uri: str, groups: Dict[str, DeclarationEntries]) -> None:
        """Atomically swap the contents of one file.

        Args:
            uri: The file being replaced.
            groups: Definitions and injection points keyed by declaration key.
        """
        with self._lock:
            self._delete_file(uri)
            for declaration_key, (definitions, injection_points) in groups.items():
                self._delete_declaration(declaration_key)
                self._insert_declaration(declaration_key, definitions, injection_points)
            self._generation += 1

    def replace_all(self, groups: Dict[str, DeclarationEntries]) -> None:
        """Atomically replace the whole index, as at the end of a full scan."""
        with self._lock:
            self._clear()
            for declaration_key, (definitions, injection_points) in groups.items():
                self._insert_declaration(declaration_key, definitions, injection_points)
            self._generation += 1
            log.info(
                "bean_index.replaced",
                definitions=len(self._definitions),
                injection_points=len(self._injections),
            )

    def _clear(self) -> None:
        self._definitions.clear()
        self._by_type.clear()
        self._by_simple_name.clear()
        self._by_name.clear()
        self._by_qualifier.clear()
        self._injections.clear()
        self._injections_by_simple_name.clear()
        self._declarations.clear()

    def clear(self) -> None:
        """Remove all definitions and injection points."""
        with self._lock:
            self._clear()
            self._generation += 1

    def get_stats(self) -> IndexStats:
        with self._lock:
            files = {definition.location.uri for definition in self._definitions.values()}
            files.update(injection.location.uri for injection in self._injections.values())
            return IndexStats(
                total_definitions=len(self._definitions),
                total_injection_points=len(self._injections),
                indexed_files=len(files),
                generation=self._generation,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __contains__(self, location_key: object) -> bool:
        with self._lock:
            return location_key in self._definitions
