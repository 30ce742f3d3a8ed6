"""Source page metadata attached to copied blocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..dom.node import Document


@dataclass(frozen=True)
class PageInfo:
    """Title and URL of the page a block was copied from."""

    title: str = ""
    url: str = ""

    @classmethod
    def from_document(
        cls,
        document: Optional[Document],
        title: Optional[str] = None,
        url: Optional[str] = None,
    ) -> PageInfo:
        """Take title and URL from the document unless given explicitly."""
        return cls(
            title=title if title is not None else (document.title if document else ""),
            url=url if url is not None else (document.url if document else ""),
        )
