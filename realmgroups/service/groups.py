"""
Service layer for groups.
"""

from collections.abc import Mapping

import httpx
import structlog
from pydantic import NonNegativeInt
from structlog.typing import FilteringBoundLogger

from realmgroups.core.group import GroupRepresentation
from realmgroups.core.location import ResponseParseError, id_from_location
from realmgroups.core.query import GroupQuery
from realmgroups.toolkit.client import AdminClient, ResponseDecodeError

GROUPS_PATH = "/realms/{realm}/groups"
GROUP_PATH = "/realms/{realm}/groups/{id}"
GROUP_COUNT_PATH = "/realms/{realm}/groups/count"
GROUP_CHILDREN_PATH = "/realms/{realm}/groups/{id}/children"

# Depending on version the server answers `n` or `{"count": n}`
CountBody = NonNegativeInt | dict[str, NonNegativeInt]


class GroupService:
    """
    Group management for a realm. Every method performs exactly one request
    and keeps no state between calls, so one instance can be shared by any
    number of tasks.

    Cancelling the calling task aborts the request in flight; the
    cancellation propagates and nothing is decoded.
    """

    def __init__(self, client: AdminClient, log: FilteringBoundLogger | None = None):
        self.client = client
        self.log = log if log is not None else structlog.get_logger()

    async def get_groups(
        self,
        realm: str,
        query: GroupQuery | Mapping[str, str] | None = None,
    ) -> list[GroupRepresentation]:
        """
        List the groups in a realm.

        Parameters
        ----------
        realm: str
            The realm to list.
        query: GroupQuery | Mapping[str, str] | None, optional
            Filters (`first`, `max`, `search`, ...). A plain mapping is sent
            as-is, including keys this client does not know about.
        """
        match query:
            case None:
                params = None
            case GroupQuery():
                params = query.to_params()
            case _:
                params = dict(query)

        log = self.log.bind(realm=realm, params=params)

        response = await self.client.get(
            GROUPS_PATH, path_params={"realm": realm}, params=params
        )
        groups = self.client.decode(response, list[GroupRepresentation])

        await log.adebug("group.listed", number_of_groups=len(groups))

        return groups

    async def create(self, realm: str, group: GroupRepresentation) -> str:
        """
        Create a top-level group.

        Returns
        -------
        str
            The identifier the server assigned to the group.

        Raises
        ------
        ResponseParseError
            If the server accepted the group but did not say where it lives.
        """
        log = self.log.bind(realm=realm, group_name=group.name)

        response = await self.client.post(
            GROUPS_PATH,
            path_params={"realm": realm},
            json=group.to_body(include_id=False),
        )
        group_id = await self._created_id(response, log)

        await log.ainfo("group.created", group_id=group_id)

        return group_id

    async def count(
        self, realm: str, search: str | None = None, top: bool | None = None
    ) -> int:
        """
        Count the groups in a realm. Without arguments no filters are sent
        and the count covers every group.

        The `search` and `top` filters are extras the server's count
        endpoint also accepts; leave them unset for the plain aggregate.

        Parameters
        ----------
        search: str | None, optional
            Only count groups whose name contains this string.
        top: bool | None, optional
            Only count top-level groups.
        """
        params = {}
        if search is not None:
            params["search"] = search
        if top is not None:
            params["top"] = "true" if top else "false"

        log = self.log.bind(realm=realm, **params)

        response = await self.client.get(
            GROUP_COUNT_PATH, path_params={"realm": realm}, params=params or None
        )

        content = self.client.decode(response, CountBody)

        if isinstance(content, dict):
            if "count" not in content:
                raise ResponseDecodeError(f"No count in response: {content}")
            content = content["count"]

        await log.adebug("group.counted", count=content)

        return content

    async def get(self, realm: str, group_id: str) -> GroupRepresentation:
        """
        Read a group by its ID.

        Raises
        ------
        realmgroups.toolkit.client.NotFoundError
            If the group does not exist.
        """
        log = self.log.bind(realm=realm, group_id=group_id)

        response = await self.client.get(
            GROUP_PATH, path_params={"realm": realm, "id": group_id}
        )
        group = self.client.decode(response, GroupRepresentation)

        await log.adebug("group.found")

        return group

    async def update(self, realm: str, group: GroupRepresentation) -> None:
        """
        Replace a group with `group`. The whole record is sent; anything not
        set on it is cleared on the server, so update a freshly read copy.
        """
        log = self.log.bind(realm=realm, group_id=group.id)

        await self.client.put(
            GROUP_PATH,
            path_params={"realm": realm, "id": group.id or ""},
            json=group.to_body(),
        )

        await log.ainfo("group.updated")

    async def delete(self, realm: str, group_id: str) -> None:
        """
        Delete a group by its ID. Deleting a group that does not exist is an
        error (`NotFoundError`).
        """
        log = self.log.bind(realm=realm, group_id=group_id)

        await self.client.delete(
            GROUP_PATH, path_params={"realm": realm, "id": group_id}
        )

        await log.ainfo("group.deleted")

    async def add_child(
        self, realm: str, parent_id: str, group: GroupRepresentation
    ) -> str:
        """
        Create a group as a child of `parent_id`.

        Returns
        -------
        str
            The identifier the server assigned to the child.

        Raises
        ------
        ResponseParseError
            If the server accepted the group but did not say where it lives.
        """
        log = self.log.bind(realm=realm, parent_id=parent_id, group_name=group.name)

        response = await self.client.post(
            GROUP_CHILDREN_PATH,
            path_params={"realm": realm, "id": parent_id},
            json=group.to_body(include_id=False),
        )
        group_id = await self._created_id(response, log)

        await log.ainfo("group.child_created", group_id=group_id)

        return group_id

    async def _created_id(
        self, response: httpx.Response, log: FilteringBoundLogger
    ) -> str:
        location = response.headers.get("Location")

        try:
            return id_from_location(location)
        except ResponseParseError as e:
            await log.awarning(
                "group.location_invalid", location=location, error=str(e)
            )
            raise e
