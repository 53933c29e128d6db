"""Result types returned by a search."""

from dataclasses import dataclass

# Source tag and identifier of results that did not come from the catalog
AI_SEARCH_SOURCE = "ai-search"
UNRESOLVED_ID = 0

# Sentinel line the model writes when nothing fits the query
NO_GAMES_SENTINEL = "NO_GAMES"


@dataclass(frozen=True)
class CatalogEntry:
    """One candidate returned by the catalog lookup."""
    name: str
    id: int
    image: str
    source: str


@dataclass(frozen=True)
class ResultRecord:
    """A search result handed back to the host.

    Either a catalog entry (optionally annotated) or a free-standing
    annotation with the unresolved identifier.
    """

    name: str
    id: int = UNRESOLVED_ID
    image: str = ""
    source: str = AI_SEARCH_SOURCE

    def __post_init__(self):
        if self.id == UNRESOLVED_ID and self.source != AI_SEARCH_SOURCE:
            raise ValueError(
                f"Unresolved result '{self.name}' must use source '{AI_SEARCH_SOURCE}'"
            )

    @classmethod
    def from_catalog(cls, entry: CatalogEntry, comment: str = "") -> "ResultRecord":
        """Build a result from a catalog match, appending the comment as a suffix."""
        name = f"{entry.name} ({comment})" if comment else entry.name
        return cls(name=name, id=entry.id, image=entry.image, source=entry.source)

    @classmethod
    def annotation(cls, text: str) -> "ResultRecord":
        return cls(name=text)

    @property
    def resolved(self) -> bool:
        return self.id != UNRESOLVED_ID

    def to_dict(self) -> dict:
        """Convert to the dict shape hosts expect."""
        return {
            "name": self.name,
            "appID": self.id,
            "capsuleImage": self.image,
            "storefront": self.source,
        }
