"""Pydantic model for the options that steer value escaping.

Options are fixed per template call (or bound once on a tag)::

    from contextql import pg

    tag = pg.with_options(time_zone="Z", forbid_qualified=True)

CamelCase aliases (``stringifyObjects``, ``timeZone``, ``forbidQualified``)
are accepted alongside the snake_case field names.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EscapeOptions(BaseModel):
    """Configuration for a single escaping run.

    Attributes:
        stringify_objects: Escape mappings and plain objects as the quoted
            text of ``str(value)`` instead of a ``key = value`` list.
        time_zone: ``"local"``, ``"Z"``, or a fixed offset such as
            ``"+05:00"``, ``"+0200"`` or ``"+01"``.  Anything else is UTC.
        forbid_qualified: Treat ``.`` as an ordinary identifier character
            and reject trusted fragments shaped like ``a.b``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    stringify_objects: bool = Field(False, alias="stringifyObjects")
    time_zone: str = Field("local", alias="timeZone")
    forbid_qualified: bool = Field(False, alias="forbidQualified")

    def merged(self, **overrides: object) -> EscapeOptions:
        """Return a copy with ``overrides`` (snake_case or camelCase) applied."""
        if not overrides:
            return self
        update = EscapeOptions.model_validate(overrides)
        return self.model_copy(
            update={name: getattr(update, name) for name in update.model_fields_set}
        )


#: Options used when a caller passes none.
DEFAULT_OPTIONS = EscapeOptions()
