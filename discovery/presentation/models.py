"""Result set handed from the matching engine to presenters."""

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence, Tuple

from discovery.domain.models import SearchRequest
from discovery.matching.models import MatchRecord


class PresentationError(Exception):
    """Raised when a result set cannot be rendered."""

    pass


@dataclass(frozen=True)
class MatchResults:
    """Immutable, ranked result set for one search.

    Attributes:
        records: Match records, best first
        request: The search request that produced them
        snapshot_version: Version of the catalog snapshot that was searched
    """

    records: Tuple[MatchRecord, ...]
    request: SearchRequest
    snapshot_version: int

    @classmethod
    def build(
        cls, records: Sequence[MatchRecord], request: SearchRequest, snapshot_version: int
    ) -> "MatchResults":
        return cls(records=tuple(records), request=request, snapshot_version=snapshot_version)

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def best(self) -> Optional[MatchRecord]:
        return self.records[0] if self.records else None

    def __iter__(self) -> Iterator[MatchRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


class ResultPresenter(Protocol):
    """Consumes a ranked result set. Implementations must not mutate it."""

    def present(self, results: MatchResults) -> None:
        ...
