"""
Extraction of server-assigned identifiers from `Location` headers.

The identity server does not return the identifier of a newly created
resource in the response body. Instead it points at the new resource with
the `Location` header, and the identifier is the last segment of that URL.
"""

from urllib.parse import unquote, urlsplit


class ResponseParseError(Exception):
    """
    A request succeeded but its response could not be turned into a result.
    """

    location: str | None

    def __init__(self, message: str, location: str | None = None):
        super().__init__(message)
        self.location = location


def id_from_location(location: str | None) -> str:
    """
    Extract the resource identifier from a `Location` header value.

    Parameters
    ----------
    location: str | None
        The raw header value, or None if the header was absent.

    Returns
    -------
    str
        The final path segment of the URL, percent-decoded.

    Raises
    ------
    ResponseParseError
        If the header is missing or blank, is not a parseable URL, or its
        path ends in an empty segment.
    """

    if location is None or not location.strip():
        raise ResponseParseError("Location header is missing", location=location)

    try:
        path = urlsplit(location.strip()).path
    except ValueError as e:
        raise ResponseParseError(
            f"Location header is not a valid URL: {location!r}", location=location
        ) from e

    identifier = unquote(path.split("/")[-1])

    if not identifier:
        raise ResponseParseError(
            f"Location header has no identifier segment: {location!r}",
            location=location,
        )

    return identifier
