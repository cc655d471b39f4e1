"""Pydantic model for the placeholder markers a builder renders.

Placeholders are written into the raw statement as single tokens so that
compilation and subquery merging can recover them by scanning the text.
Ordinal placeholders carry ``ordinal_prefix`` followed by their number,
named placeholders carry ``named_prefix`` followed by the reference::

    SELECT * FROM "t" WHERE "a" = $$1 AND "b" = $?tenant

The defaults match the markers above.  A custom profile is passed to the
builder directly::

    from chainql import BuilderSettings, SQLStringBuilder

    settings = BuilderSettings(ordinal_prefix="@@", named_prefix="@:")
    query = SQLStringBuilder(settings).WHERE().column("a").equals().query_param()
    assert str(query) == 'WHERE "a" = @@1'
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class BuilderSettings(BaseModel):
    """Marker configuration shared by every builder in one statement.

    Attributes:
        ordinal_prefix: Prefix of ordinal placeholder tokens.
        named_prefix: Prefix of named placeholder tokens.
        display_marker: Replacement for both prefixes in pretty output.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    ordinal_prefix: str = "$$"
    named_prefix: str = "$?"
    display_marker: str = "$"

    @model_validator(mode="after")
    def _check_prefixes(self) -> "BuilderSettings":
        """Reject prefixes that would make the two marker kinds ambiguous."""
        for name in ("ordinal_prefix", "named_prefix"):
            value = getattr(self, name)
            if not value or any(ch.isspace() for ch in value):
                raise ValueError(f"{name} must be non-empty and contain no whitespace.")
        if self.ordinal_prefix.startswith(self.named_prefix) or self.named_prefix.startswith(
            self.ordinal_prefix
        ):
            raise ValueError(
                "ordinal_prefix and named_prefix must not be prefixes of each other: "
                f"{self.ordinal_prefix!r} / {self.named_prefix!r}."
            )
        return self

    def ordinal_marker(self, ordinal: int) -> str:
        """Return the placeholder token for ``ordinal``."""
        return f"{self.ordinal_prefix}{ordinal}"

    def named_marker(self, reference: object) -> str:
        """Return the placeholder token for a named ``reference``."""
        return f"{self.named_prefix}{reference}"


#: Settings used by builders created without an explicit profile.
DEFAULT_SETTINGS = BuilderSettings()
