"""
Core group data models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GroupRepresentation(BaseModel):
    """
    A group as the identity server represents it on the wire. Attribute
    names are snake_case; the camelCase names the server uses are aliases.

    Fields the server sends that are not modelled here are kept, so that a
    fetched group can be modified and sent back with `update` without
    dropping them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    name: str | None = None
    # Computed by the server from the group's ancestry
    path: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")
    sub_group_count: int | None = Field(default=None, alias="subGroupCount")
    attributes: dict[str, list[str]] | None = None
    realm_roles: list[str] | None = Field(default=None, alias="realmRoles")
    client_roles: dict[str, list[str]] | None = Field(
        default=None, alias="clientRoles"
    )
    sub_groups: list["GroupRepresentation"] | None = Field(
        default=None, alias="subGroups"
    )
    access: dict[str, bool] | None = None

    def to_body(self, include_id: bool = True) -> dict[str, Any]:
        """
        Serialize for a request body, using the wire names and leaving out
        unset (None) fields.

        Parameters
        ----------
        include_id: bool, optional
            Whether to send the identifier. Creation requests must not.
        """
        exclude = None if include_id else {"id"}
        return self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude=exclude
        )
