"""
Online verification of SafetyNet attestation statements.

Sends the signed statement to Google's Android Device Verification API, which
checks the JWS signature and certificate chain and answers with a verdict.
The online API is intended for testing; it is rate limited per API key.
"""

import logging
from typing import Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from .base import NetworkError, ServiceError
from .config import SAFETYNET_VERIFY_URL

logger = logging.getLogger(__name__)


class VerificationRequest(BaseModel):
    """Request body for the verification endpoint."""

    model_config = ConfigDict(frozen=True)

    signed_attestation: str = Field(serialization_alias="signedAttestation")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class ServiceErrorDetail(BaseModel):
    """Google API error object."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    message: Optional[str] = None
    status: Optional[str] = None


class VerificationResponse(BaseModel):
    """
    Response from the verification endpoint.

    ``error`` is only set when the service failed to process the request; in
    that case the signature verdict is meaningless.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    is_valid_signature: StrictBool = Field(default=False, alias="isValidSignature")
    error: Optional[Union[str, ServiceErrorDetail]] = None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        if isinstance(self.error, str):
            return self.error
        return self.error.message or self.error.status or f"error code {self.error.code}"


def interpret_response(response: httpx.Response, url: str) -> bool:
    """
    Turn an HTTP response from the verification endpoint into a verdict.

    Raises:
        NetworkError: If the body is not a verification response, or the
            status is not 2xx and the body carries no error
        ServiceError: If the service reported an error
    """
    try:
        result = VerificationResponse.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.error(f"Unparsable response from {url}: HTTP {response.status_code}")
        raise NetworkError(
            f"Failure: Unparsable response (HTTP {response.status_code}) from the "
            f"verification service {url}: {e}",
            url=url,
            status_code=response.status_code,
        )

    if result.error is not None:
        logger.warning(f"Verification service error: {result.error_message}")
        raise ServiceError(result.error_message)

    if not response.is_success:
        logger.error(f"Verification service returned HTTP {response.status_code}")
        raise NetworkError(
            f"Failure: HTTP {response.status_code} from the verification service {url}",
            url=url,
            status_code=response.status_code,
        )

    return result.is_valid_signature


def _network_error(url: str, error: httpx.RequestError) -> NetworkError:
    logger.error(f"Network error while connecting to {url}: {error}")
    return NetworkError(
        f"Failure: Network error while connecting to the Google Service {url}: {error}",
        url=url,
    )


class OnlineVerifier:
    """
    Client for the Android Device Verification API.

    The httpx client is owned by the caller. Without one, a client is opened
    and closed for every call. One request per ``verify`` call; no retries and
    no caching of verdicts.
    """

    def __init__(self, api_key: str, client: Optional[httpx.Client] = None,
                 url: str = SAFETYNET_VERIFY_URL, timeout: float = 30):
        if not api_key:
            raise ValueError("An API key is required for the verification service")
        self.api_key = api_key
        self.client = client
        self.url = url
        self.timeout = timeout

    def verify(self, token: str) -> bool:
        """
        Ask the verification service whether the token's signature is valid.

        Args:
            token: The signed attestation statement

        Returns:
            The service's isValidSignature verdict

        Raises:
            NetworkError: If the service is unreachable or its answer unusable
            ServiceError: If the service reported an error
        """
        request = VerificationRequest(signed_attestation=token)
        try:
            if self.client is not None:
                response = self._post(self.client, request)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = self._post(client, request)
        except httpx.RequestError as e:
            raise _network_error(self.url, e)

        return interpret_response(response, self.url)

    def _post(self, client: httpx.Client, request: VerificationRequest) -> httpx.Response:
        return client.post(
            self.url,
            params={"key": self.api_key},
            json=request.to_json(),
            timeout=self.timeout,
        )


class AsyncOnlineVerifier:
    """Asyncio flavour of OnlineVerifier over httpx.AsyncClient."""

    def __init__(self, api_key: str, client: Optional[httpx.AsyncClient] = None,
                 url: str = SAFETYNET_VERIFY_URL, timeout: float = 30):
        if not api_key:
            raise ValueError("An API key is required for the verification service")
        self.api_key = api_key
        self.client = client
        self.url = url
        self.timeout = timeout

    async def verify(self, token: str) -> bool:
        request = VerificationRequest(signed_attestation=token)
        try:
            if self.client is not None:
                response = await self._post(self.client, request)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, request)
        except httpx.RequestError as e:
            raise _network_error(self.url, e)

        return interpret_response(response, self.url)

    async def _post(self, client: httpx.AsyncClient,
                    request: VerificationRequest) -> httpx.Response:
        return await client.post(
            self.url,
            params={"key": self.api_key},
            json=request.to_json(),
            timeout=self.timeout,
        )
