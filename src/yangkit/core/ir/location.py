"""Source position tracking for statements and model entities.

Every statement records where it started; model entities built from a
statement keep a :class:`StatementOrigin` so diagnostics can point back at
the source even after the statement tree is gone.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    """Line and column (both 1-indexed) of a character in the source text."""

    line: int
    column: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class StatementOrigin(BaseModel):
    """Keyword and position of the statement a model entity was built from."""

    keyword: str
    position: Position
    prefix: str | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        keyword = f"{self.prefix}:{self.keyword}" if self.prefix else self.keyword
        return f'"{keyword}" ({self.position})'
