"""Feed definitions.

A FeedSpec fixes the on-disk column order of a feed and the CSV dialect
used to write it. Header fields double as the keys used to read values out
of each record.
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass

__all__ = [
    "DEFAULT_DELIMITER",
    "DEFAULT_QUOTE_CHAR",
    "DEFAULT_ESCAPE_CHAR",
    "DEFAULT_DIRECTORY_TEMPLATE",
    "FeedSpec",
]

DEFAULT_DELIMITER = ","
DEFAULT_QUOTE_CHAR = '"'
DEFAULT_ESCAPE_CHAR = "\\"
DEFAULT_DIRECTORY_TEMPLATE = "feeds/{feed_name}"

# Feed names end up in directory and file names.
_FEED_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _require_char(label: str, value: str) -> None:
    if len(value) != 1:
        raise ValueError(f"{label} must be a single character, got {value!r}")


@dataclass(frozen=True, slots=True)
class FeedSpec:
    """Immutable description of one CSV feed.

    Attributes:
        name: Feed name, used for the feed directory and file names
        header_fields: Column names, in output order
        delimiter: Field separator
        quote_char: Enclosure for fields that need quoting
        escape_char: Escape character passed to the CSV writer
    """

    name: str
    header_fields: tuple[str, ...]
    delimiter: str = DEFAULT_DELIMITER
    quote_char: str = DEFAULT_QUOTE_CHAR
    escape_char: str = DEFAULT_ESCAPE_CHAR

    def __post_init__(self) -> None:
        if not _FEED_NAME_RE.match(self.name):
            raise ValueError(f"invalid feed name: {self.name!r}")
        # Accept any sequence but always store a tuple.
        object.__setattr__(self, "header_fields", tuple(self.header_fields))
        if not self.header_fields:
            raise ValueError(f"feed {self.name!r} has no header fields")
        _require_char("delimiter", self.delimiter)
        _require_char("quote_char", self.quote_char)
        _require_char("escape_char", self.escape_char)
        if self.delimiter == self.quote_char:
            raise ValueError("delimiter and quote_char must differ")

    @classmethod
    def from_header_row(
        cls,
        name: str,
        header_row: str,
        *,
        delimiter: str = DEFAULT_DELIMITER,
        quote_char: str = DEFAULT_QUOTE_CHAR,
        escape_char: str = DEFAULT_ESCAPE_CHAR,
    ) -> FeedSpec:
        """Build a spec from a header given as a single CSV line.

        The header line is always parsed as comma separated, whatever
        delimiter the feed is written with.
        """
        rows = list(csv.reader([header_row]))
        fields = tuple(field.strip() for field in rows[0]) if rows else ()
        return cls(
            name=name,
            header_fields=fields,
            delimiter=delimiter,
            quote_char=quote_char,
            escape_char=escape_char,
        )

    def dialect_kwargs(self) -> dict[str, object]:
        """Keyword arguments for ``csv.writer``.

        Quotes inside fields are doubled, so no escape character is passed:
        csv.writer would otherwise double every escape_char found in the data.
        """
        return {
            "delimiter": self.delimiter,
            "quotechar": self.quote_char,
            "escapechar": None,
            "doublequote": True,
            "quoting": csv.QUOTE_MINIMAL,
            "lineterminator": "\n",
        }
