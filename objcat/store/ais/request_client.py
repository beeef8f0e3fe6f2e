#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#
from urllib.parse import urljoin, urlencode
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from requests import Response

from objcat.const import (
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
    JSON_CONTENT_TYPE,
    USER_AGENT_BASE,
)
from objcat.store.ais.response_handler import AISResponseHandler, ResponseHandler
from objcat.store.ais.session_manager import SessionManager
from objcat.utils import decode_response, get_logger
from objcat.version import __version__ as objcat_version

T = TypeVar("T")
logger = get_logger(__name__)


class RequestClient:
    """
    Internal client for making requests to an AIS gateway.

    Requests are attempted once; re-issuing a failed request is left to the caller so that a retried range read
    goes back through the gateway and gets redirected to a live target.

    Args:
        endpoint (str): Endpoint of the AIS gateway.
        session_manager (SessionManager): SessionManager for creating and accessing requests session.
        timeout (Union[float, Tuple[float, float], None], optional): Request timeout in seconds; a single float
            for both connect/read timeouts (e.g., 5.0), a tuple for separate connect/read timeouts (e.g., (3.0, 10.0)),
            or None to disable timeout.
        token (str, optional): Authorization token.
        response_handler (ResponseHandler, optional): Handler for processing HTTP responses.
            Defaults to AISResponseHandler.
    """

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        endpoint: str,
        session_manager: SessionManager,
        timeout: Optional[Union[float, Tuple[float, float]]] = None,
        token: Optional[str] = None,
        response_handler: Optional[ResponseHandler] = None,
    ):
        self._base_url = urljoin(endpoint, "v1")
        self._session_manager = session_manager
        self._token = token
        self._timeout = timeout
        self._response_handler = response_handler or AISResponseHandler()

    @property
    def base_url(self):
        """Return the base URL."""
        return self._base_url

    @property
    def timeout(self):
        return self._timeout

    @property
    def session_manager(self) -> SessionManager:
        return self._session_manager

    @property
    def token(self) -> Optional[str]:
        return self._token

    def request_deserialize(
        self, method: str, path: str, res_model: Type[T], **kwargs
    ) -> T:
        """
        Make a request and deserialize the response to a defined type.

        Args:
            method (str): HTTP method (e.g. GET, HEAD).
            path (str): URL path to call.
            res_model (Type[T]): Resulting type to which the response should be deserialized.
            **kwargs (optional): Optional keyword arguments to pass with the call to request.

        Returns:
            Parsed result of the call to the API, as res_model.
        """
        resp = self.request(method, path, **kwargs)
        return decode_response(res_model, resp)

    def request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> Response:
        """
        Make a single request through the pooled session.

        Args:
            method (str): HTTP method (e.g. GET, HEAD).
            path (str): URL path to call.
            headers (Dict[str, Any]): Extra headers to be passed with the request.
                Content-Type and User-Agent will be overridden.
            **kwargs (optional): Optional keyword arguments to pass with the call to request.

        Returns:
            The HTTP response from the server.

        Raises:
            AISError: The server answered with an error status
            requests.RequestException: The request did not complete
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        request_kwargs = {"headers": self._generate_headers(headers), **kwargs}
        if self._timeout is not None and "timeout" not in request_kwargs:
            request_kwargs["timeout"] = self._timeout
        logger.debug("%s %s", method.upper(), url)
        response = self._session_manager.session.request(method, url, **request_kwargs)
        return self._response_handler.handle_response(response)

    def _generate_headers(
        self, headers: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        headers = dict(headers) if headers else {}
        headers[HEADER_CONTENT_TYPE] = JSON_CONTENT_TYPE
        headers[HEADER_USER_AGENT] = f"{USER_AGENT_BASE}/{objcat_version}"
        if self._token:
            headers[HEADER_AUTHORIZATION] = f"Bearer {self._token}"
        return headers

    def get_full_url(self, path: str, params: Dict[str, Any]) -> str:
        """
        Get the full URL to the path on the cluster with the given parameters.

        Args:
            path (str): Path on the cluster.
            params (Dict[str, Any]): Query parameters to include.

        Returns:
            URL including cluster base URL and parameters.
        """
        return f"{self._base_url}/{path.lstrip('/')}?{urlencode(params)}"
