#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from abc import ABC, abstractmethod
from typing import Optional, Type

import requests
from pydantic import ValidationError

from objcat.const import HTTP_METHOD_GET, STATUS_CONFLICT, STATUS_NOT_FOUND
from objcat.errors import (
    AISError,
    APIRequestError,
    ErrBckNotFound,
    ErrGETConflict,
    ErrObjNotFound,
    ErrRemoteBckNotFound,
    InvalidBckProvider,
)
from objcat.provider import Provider
from objcat.utils import HttpError, extract_and_parse_url


class ResponseHandler(ABC):
    """
    Abstract base class for handling HTTP API responses
    """

    def handle_response(self, r: requests.Response) -> requests.Response:
        """
        Return a successful response as is; raise a parsed error for a failed one

        Args:
            r (requests.Response): Response from the server
        """
        if 200 <= r.status_code < 400:
            return r
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError as http_err:
            # Raise specific error type but keep full HTTPError with stack trace
            raise self.parse_error(r) from http_err
        raise self.exc_class(r.status_code, r.text, r.request.url or "")

    @abstractmethod
    def parse_error(self, r: requests.Response) -> APIRequestError:
        """Parse custom exception from failed response (must be implemented)"""

    @property
    @abstractmethod
    def exc_class(self) -> Type[APIRequestError]:
        """Exception class for generic error handling (must be implemented)"""


class AISResponseHandler(ResponseHandler):
    """
    Handle responses from an AIS gateway
    """

    @property
    def exc_class(self) -> Type[AISError]:
        return AISError

    def parse_error(self, r: requests.Response) -> AISError:
        """
        Parse response contents into the most specific AISError.

        Args:
            r (requests.Response): Failed response from AIS

        Returns:
            ErrObjNotFound: 404 naming an object
            ErrRemoteBckNotFound: 404 naming a remote bucket
            ErrBckNotFound: 404 naming an AIS bucket
            ErrGETConflict: 409 on a GET, e.g. while the object is being fetched from its remote backend
            AISError: Anything else
        """
        status, req_url = r.status_code, r.request.url
        message = self._parse_message(r)
        prov, bck, has_obj = extract_and_parse_url(message) or (None, None, None)

        if prov is not None:
            try:
                prov = Provider.parse(prov)
            except InvalidBckProvider:
                prov = None

        is_remote_alias_bck = bck is not None and "@" in bck
        is_remote_bck = (prov is not None) and (prov.is_remote() or is_remote_alias_bck)
        is_get_request = (r.request.method or "").lower() == HTTP_METHOD_GET

        exc = self.exc_class
        if status == STATUS_NOT_FOUND:
            exc = self._parse_404(is_remote_bck, prov, has_obj) or exc
        elif status == STATUS_CONFLICT and is_get_request:
            exc = ErrGETConflict

        return exc(status, message, req_url or "")

    @staticmethod
    def _parse_message(r: requests.Response) -> str:
        # AIS reports errors as a JSON HttpError; proxies in front of it may not
        try:
            return HttpError.model_validate_json(r.text).message or r.text
        except ValidationError:
            return r.text

    @staticmethod
    def _parse_404(
        is_remote_bck: bool,
        provider: Optional[Provider] = None,
        has_obj: Optional[bool] = None,
    ) -> Optional[Type[AISError]]:
        if provider:
            if has_obj:
                return ErrObjNotFound
            if is_remote_bck:
                return ErrRemoteBckNotFound
            return ErrBckNotFound
        return None
