"""
Query options for listing groups.
"""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


def _render(value: bool | int | str) -> str:
    match value:
        case bool():
            return "true" if value else "false"
        case _:
            return str(value)


class GroupQuery(BaseModel):
    """
    Filters for the group listing endpoint. The known parameters are typed
    fields; anything else the server understands can go in `extra`, which
    is sent verbatim.
    """

    model_config = ConfigDict(populate_by_name=True)

    first: NonNegativeInt | None = None
    max: NonNegativeInt | None = None
    search: str | None = None
    exact: bool | None = None
    brief_representation: bool | None = Field(
        default=None, alias="briefRepresentation"
    )
    q: str | None = None

    extra: dict[str, str] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "GroupQuery":
        """
        Build a query from a plain mapping of parameters. Recognised keys
        fill the typed fields, everything else is kept in `extra`.
        """
        known = {}
        extra = {}

        for key, value in mapping.items():
            if cls._wire_name_to_field().get(key) is not None:
                known[key] = value
            else:
                extra[key] = value

        return cls.model_validate({**known, "extra": extra})

    @classmethod
    def _wire_name_to_field(cls) -> dict[str, str]:
        return {
            (info.alias or name): name
            for name, info in cls.model_fields.items()
            if name != "extra"
        }

    def to_params(self) -> dict[str, str]:
        """
        The query parameters to send. Typed fields take precedence over
        `extra` entries with the same key.
        """
        params = dict(self.extra)

        for wire_name, name in self._wire_name_to_field().items():
            value = getattr(self, name)
            if value is not None:
                params[wire_name] = _render(value)

        return params
