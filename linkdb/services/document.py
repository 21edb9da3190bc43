import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from linkdb.exceptions import ParseFailureError

logger = logging.getLogger(__name__)

AttrFilter = str | re.Pattern[str]


@dataclass(frozen=True)
class Element:
    """Read-only view of one element handed to document walkers."""

    name: str
    attrs: Mapping[str, str] = field(default_factory=dict)

    def get(self, attr: str, default: str | None = None) -> str | None:
        return self.attrs.get(attr, default)


def _attr_value(value: object) -> str:
    # Multi-valued attributes such as rel and class come back as lists.
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _as_element(tag: Tag) -> Element:
    return Element(
        name=tag.name,
        attrs={key: _attr_value(value) for key, value in tag.attrs.items()},
    )


class HtmlDocument:
    """Queryable HTML tree with a deliberately small lookup surface."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def parse(cls, markup: str) -> "HtmlDocument":
        try:
            soup = BeautifulSoup(markup, "lxml")
        except ParserRejectedMarkup as exc:
            logger.warning("HTML parser rejected document: %s", exc)
            raise ParseFailureError(f"Could not parse document: {exc}") from exc
        return cls(soup)

    def first_attr(self, tag: str, attr: str, **filters: AttrFilter) -> str | None:
        """Return ``attr`` of the first ``tag`` element matching ``filters``.

        Filter keys are attribute names; values are exact strings or compiled
        patterns searched against the attribute value.
        """
        element = self._soup.find(tag, attrs=filters)
        if not isinstance(element, Tag):
            return None
        value = element.get(attr)
        if value is None:
            return None
        return _attr_value(value)

    def first_text(self, tag: str) -> str | None:
        element = self._soup.find(tag)
        if not isinstance(element, Tag):
            return None
        return element.get_text()

    def for_each_element(
        self,
        predicate: Callable[[Element], bool],
        visitor: Callable[[Element], object],
    ) -> None:
        """Walk elements in document order; a truthy visitor result stops."""
        for tag in self._soup.find_all(True):
            element = _as_element(tag)
            if predicate(element) and visitor(element):
                return
