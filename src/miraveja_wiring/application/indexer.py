"""Application layer - Applying scanner output to the bean index."""

import threading
from typing import Dict, Iterable, Optional

import structlog

from miraveja_wiring.application.bean_index import BeanIndex, DeclarationEntries
from miraveja_wiring.application.extractor import DeclarationExtractor
from miraveja_wiring.domain import IndexStats, ScanSupersededError, TypeDeclaration

log = structlog.get_logger(__name__)


class ScanSession:
    """Collects the results of one full scan until they are committed.

    Obtained from :meth:`BeanIndexer.begin_scan`. Starting a newer scan
    supersedes this one: its results are discarded on commit.

    Attributes:
        generation: Scan generation this session belongs to.
    """

    def __init__(self, indexer: "BeanIndexer", generation: int) -> None:
        self._indexer = indexer
        self.generation = generation
        self._groups: Dict[str, DeclarationEntries] = {}
        self._closed = False

    @property
    def is_superseded(self) -> bool:
        return self._indexer.scan_generation != self.generation

    @property
    def results(self) -> Dict[str, DeclarationEntries]:
        return self._groups

    @property
    def declaration_count(self) -> int:
        return len(self._groups)

    def add(self, declaration: TypeDeclaration) -> None:
        """Extract a declaration into the pending scan results.

        Args:
            declaration: A declaration reported by the scanner.

        Raises:
            ScanSupersededError: If the session was committed or superseded.
        """
        if self._closed or self.is_superseded:
            raise ScanSupersededError(self.generation, self._indexer.scan_generation)
        result = self._indexer.extractor.extract(declaration)
        self._groups[declaration.key] = (result.definitions, result.injection_points)

    def add_all(self, declarations: Iterable[TypeDeclaration]) -> None:
        for declaration in declarations:
            self.add(declaration)

    def commit(self) -> bool:
        """Replace the index contents with this scan's results.

        Returns:
            True if the results were applied, False if a newer scan superseded
            this one and the results were discarded.
        """
        if self._closed:
            raise ScanSupersededError(self.generation, self._indexer.scan_generation)
        self._closed = True
        return self._indexer._commit_scan(self)

    def discard(self) -> None:
        self._closed = True
        self._groups.clear()

    def __enter__(self) -> "ScanSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        """Commit on normal exit, discard when the block raised."""
        if self._closed:
            return False
        if exc_type is None:
            self.commit()
        else:
            self.discard()
        return False


class BeanIndexer:
    """Keeps a bean index in step with scanner output.

    Consumes the incremental update feed (declaration added, changed or
    removed) and full scans. Full scans are supersedable: beginning a scan
    invalidates every scan begun before it.

    Attributes:
        _index: The index being maintained.
        _extractor: Extractor turning declarations into index entries.
        _scan_generation: Generation of the most recent scan.
    """

    def __init__(
        self,
        index: Optional[BeanIndex] = None,
        extractor: Optional[DeclarationExtractor] = None,
    ) -> None:
        """Initialize the indexer.

        Args:
            index: Index to maintain. A new empty index is created if omitted.
            extractor: Declaration extractor. Defaults to the Spring annotation table.
        """
        self._index = index if index is not None else BeanIndex()
        self._extractor = extractor or DeclarationExtractor()
        self._scan_lock = threading.Lock()
        self._scan_generation = 0

    @property
    def index(self) -> BeanIndex:
        return self._index

    @property
    def extractor(self) -> DeclarationExtractor:
        return self._extractor

    @property
    def scan_generation(self) -> int:
        with self._scan_lock:
            return self._scan_generation

    def update_declaration(self, declaration: TypeDeclaration) -> None:
        """Apply an added or changed declaration.

        Everything previously produced by the declaration is replaced
        wholesale in one atomic step.

        Args:
            declaration: The declaration as it now reads.
        """
        result = self._extractor.extract(declaration)
        self._index.replace_declaration(declaration.key, result.definitions, result.injection_points)
        log.debug(
            "indexer.declaration_updated",
            declaration=declaration.fully_qualified_name,
            definitions=len(result.definitions),
            injection_points=len(result.injection_points),
        )

    def remove_declaration(self, location_key: str) -> None:
        """Apply a removed declaration.

        Args:
            location_key: Location key of the declaration that disappeared.
        """
        self._index.remove_declaration(location_key)
        log.debug("indexer.declaration_removed", location=location_key)

    def update_file(self, uri: str, declarations: Iterable[TypeDeclaration]) -> None:
        """Replace everything indexed for a file with its freshly scanned declarations.

        Args:
            uri: The rescanned file.
            declarations: All declarations now in the file.
        """
        groups: Dict[str, DeclarationEntries] = {}
        for declaration in declarations:
            result = self._extractor.extract(declaration)
            groups[declaration.key] = (result.definitions, result.injection_points)
        self._index.replace_file(uri, groups)
        log.debug("indexer.file_updated", uri=uri, declarations=len(groups))

    def remove_file(self, uri: str) -> None:
        self._index.remove_file(uri)

    def begin_scan(self) -> ScanSession:
        """Start a full scan, superseding any scan still in flight.

        Returns:
            A session collecting the new scan's declarations.

        Example:
            >>> with indexer.begin_scan() as scan:
            ...     scan.add_all(scanner.declarations())
        """
        with self._scan_lock:
            self._scan_generation += 1
            generation = self._scan_generation
        log.info("indexer.scan_started", generation=generation)
        return ScanSession(self, generation)

    def _commit_scan(self, session: ScanSession) -> bool:
        with self._scan_lock:
            if session.generation != self._scan_generation:
                log.info(
                    "indexer.scan_superseded",
                    generation=session.generation,
                    current_generation=self._scan_generation,
                )
                return False
            self._index.replace_all(session.results)
        log.info("indexer.scan_committed", generation=session.generation, declarations=session.declaration_count)
        return True

    def get_stats(self) -> IndexStats:
        return self._index.get_stats()
