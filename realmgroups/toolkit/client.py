"""
An HTTP transport for the identity server's admin API, wraps around httpx.
"""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from httpx._types import QueryParamTypes
from pydantic import TypeAdapter, ValidationError
from structlog.typing import FilteringBoundLogger

T = TypeVar("T")


class TransportError(Exception):
    """
    Base class for failures of a request/response exchange.
    """

    pass


class NetworkError(TransportError):
    pass


class ResponseDecodeError(TransportError):
    pass


class HTTPStatusError(TransportError):
    """
    The server answered with a non-success status code.
    """

    status_code: int
    method: str
    url: str
    detail: str | None

    def __init__(self, status_code: int, method: str, url: str, detail: str | None):
        self.status_code = status_code
        self.method = method
        self.url = url
        self.detail = detail

        super().__init__(f"{method} {url} failed with {status_code}: {detail}")


class BadRequestError(HTTPStatusError):
    pass


class UnauthorizedError(HTTPStatusError):
    pass


class ForbiddenError(HTTPStatusError):
    pass


class NotFoundError(HTTPStatusError):
    pass


class ConflictError(HTTPStatusError):
    pass


class ServerError(HTTPStatusError):
    pass


def status_error_class(status_code: int) -> type[HTTPStatusError]:
    match status_code:
        case 400:
            return BadRequestError
        case 401:
            return UnauthorizedError
        case 403:
            return ForbiddenError
        case 404:
            return NotFoundError
        case 409:
            return ConflictError
        case code if code >= 500:
            return ServerError
        case _:
            return HTTPStatusError


def error_detail(response: httpx.Response) -> str | None:
    """
    Pull a human readable message out of an error response. The server uses
    either `errorMessage` or `error` in a JSON body.
    """

    try:
        content = response.json()
    except ValueError:
        return response.text or None

    if isinstance(content, dict):
        return content.get("errorMessage") or content.get("error") or response.text

    return response.text or None


def fill_path(path: str, path_params: dict[str, str] | None = None) -> str:
    """
    Substitute `{name}` placeholders in a path template. Values are
    percent-encoded so that they always stay within a single segment.

    Raises
    ------
    ValueError
        If the template references a parameter that was not supplied.
    """

    quoted = {k: quote(str(v), safe="") for k, v in (path_params or {}).items()}

    try:
        return path.format_map(quoted)
    except KeyError as e:
        raise ValueError(f"No value for path parameter {e} in {path}") from e


class BearerAuth(httpx.Auth):
    """
    An authentication provider for httpx that attaches a fixed bearer token.
    Obtaining and refreshing the token is up to the caller.
    """

    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


class AdminClient:
    """
    An async client for the admin REST API. Safe to share between tasks.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: httpx.Auth | None = None,
        verify: bool = True,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        log: FilteringBoundLogger | None = None,
    ):
        """
        Create the admin client.

        Parameters
        ----------
        base_url: str
            The root of the admin API, e.g. https://idp.example.org/admin.
            All paths are relative to this.
        auth: httpx.Auth | None, optional
            Authentication to apply to each request, e.g. `BearerAuth`.
        verify: bool, optional
            Whether to verify TLS certificates.
        headers: dict[str, str] | None, optional
            Extra headers sent with every request.
        client: httpx.AsyncClient | None, optional
            A pre-built httpx client to use instead of creating one. It is
            not closed by `aclose`.
        log: FilteringBoundLogger | None, optional
            Logger, defaults to `structlog.get_logger()`.
        """
        self.base_url = base_url if base_url[-1] != "/" else base_url[:-1]
        self.log = log if log is not None else structlog.get_logger()

        self._owns_client = client is None

        if client is None:
            # Deadlines are the caller's business; never time out on our own.
            client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=auth,
                verify=verify,
                headers={"Accept": "application/json", **(headers or {})},
                timeout=None,
            )

        self._client = client

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AdminClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
        params: QueryParamTypes | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        """
        Perform a single request and translate failures.

        Raises
        ------
        NetworkError
            If the request could not be completed.
        HTTPStatusError
            (or a subclass) if the server returned a non-success status.
        """
        url = self.url(fill_path(path, path_params))
        log = self.log.bind(method=method, url=url)

        await log.adebug("http.request", params=params)

        try:
            response = await self._client.request(
                method, url, params=params, json=json
            )
        except httpx.TransportError as e:
            await log.ainfo("http.error", error=str(e))
            raise NetworkError(f"{method} {url} failed: {e}") from e

        if not response.is_success:
            detail = error_detail(response)
            await log.ainfo(
                "http.error", status_code=response.status_code, detail=detail
            )
            raise status_error_class(response.status_code)(
                status_code=response.status_code,
                method=method,
                url=str(response.request.url),
                detail=detail,
            )

        return response

    async def get(
        self,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
        params: QueryParamTypes | None = None,
    ) -> httpx.Response:
        return await self.request(
            "GET", path, path_params=path_params, params=params
        )

    async def post(
        self,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        return await self.request("POST", path, path_params=path_params, json=json)

    async def put(
        self,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        return await self.request("PUT", path, path_params=path_params, json=json)

    async def delete(
        self, path: str, *, path_params: dict[str, str] | None = None
    ) -> httpx.Response:
        return await self.request("DELETE", path, path_params=path_params)

    def decode(self, response: httpx.Response, type_: type[T]) -> T:
        """
        Validate a JSON response body into `type_`.

        Raises
        ------
        ResponseDecodeError
            If the body is not JSON or does not match the type.
        """
        try:
            return TypeAdapter(type_).validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"Could not decode response from {response.request.url}: {e}"
            ) from e
