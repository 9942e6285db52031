"""
A simple CLI for managing the groups of a realm.
"""

import asyncio
import sys

import structlog

from realmgroups.config.settings import Settings
from realmgroups.core.group import GroupRepresentation
from realmgroups.core.location import ResponseParseError
from realmgroups.service.groups import GroupService
from realmgroups.toolkit.client import TransportError

USAGE = """Usage:
    realmgroups list [realm] [key=value ...]
    realmgroups count [realm]
    realmgroups get {realm} {id}
    realmgroups create {realm} {name}
    realmgroups add-child {realm} {parent_id} {name}
    realmgroups rename {realm} {id} {new_name}
    realmgroups delete {realm} {id}"""


def dump(group: GroupRepresentation) -> str:
    return group.model_dump_json(by_alias=True, exclude_none=True)


async def run(command: str, arguments: list[str], settings: Settings) -> list[str]:
    """
    Run a single command against the server, returning the lines to print.

    Raises
    ------
    IndexError
        If required arguments are missing.
    ValueError
        If the command is not known.
    """

    async with settings.client() as client:
        groups = GroupService(client=client)

        match command:
            case "list":
                realm = arguments[0] if arguments else settings.default_realm
                # Sent verbatim, the server validates its own parameters
                query = dict(a.split("=", 1) for a in arguments[1:])
                return [dump(g) for g in await groups.get_groups(realm, query)]
            case "count":
                realm = arguments[0] if arguments else settings.default_realm
                return [str(await groups.count(realm))]
            case "get":
                return [dump(await groups.get(arguments[0], arguments[1]))]
            case "create":
                group = GroupRepresentation(name=arguments[1])
                return [await groups.create(arguments[0], group)]
            case "add-child":
                group = GroupRepresentation(name=arguments[2])
                return [await groups.add_child(arguments[0], arguments[1], group)]
            case "rename":
                group = await groups.get(arguments[0], arguments[1])
                group.name = arguments[2]
                await groups.update(arguments[0], group)
                return []
            case "delete":
                await groups.delete(arguments[0], arguments[1])
                return []
            case _:
                raise ValueError(f"Unknown command {command}")


def main(argv: list[str] | None = None):
    argv = sys.argv[1:] if argv is None else argv

    # stdout carries only results; log events go to stderr.
    previous_config = structlog.get_config()
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))

    try:
        command, arguments = argv[0], argv[1:]
        lines = asyncio.run(run(command, arguments, Settings()))
    except (IndexError, ValueError):
        print(USAGE)
        sys.exit(1)
    except (TransportError, ResponseParseError) as e:
        print(f"Error: {e}")
        sys.exit(2)
    finally:
        structlog.configure(**previous_config)

    for line in lines:
        print(line)
