"""
Device credential handling.

A single bearer token is cached in a plain text file. It is reused across runs,
fetched from the auth endpoint when missing, and discarded when the logging
endpoint rejects it.
"""

import logging
import os
from typing import Optional

import requests
from pydantic import BaseModel

from .errors import AuthFailed, NoTokenInResponse, TokenNotFound, TokenStorageError

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-device-token"


class AuthResponse(BaseModel):
    """Body of the auth endpoint response."""

    token: Optional[str] = None


class TokenManager:
    """Owns the single persisted device credential."""

    def __init__(
        self,
        token_file: str,
        auth_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.token_file = token_file
        self.auth_url = auth_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def load(self) -> str:
        """
        Read the stored credential.

        Raises:
            TokenNotFound: file is missing, unreadable or blank
        """
        try:
            with open(self.token_file, "r", encoding="utf-8") as f:
                token = f.read().strip()
        except FileNotFoundError:
            raise TokenNotFound(f"No token file at {self.token_file}")
        except (OSError, UnicodeDecodeError) as e:
            raise TokenNotFound(f"Could not read token file {self.token_file}: {e}") from e

        if not token:
            raise TokenNotFound(f"Token file {self.token_file} is empty")
        return token

    def save(self, token: str) -> None:
        """
        Persist ``token``, replacing any stored credential.

        Raises:
            TokenStorageError: the token file could not be written
        """
        try:
            directory = os.path.dirname(self.token_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.token_file, "w", encoding="utf-8") as f:
                f.write(token.strip())
        except OSError as e:
            raise TokenStorageError(f"Could not write token file {self.token_file}: {e}") from e

    def fetch(self) -> str:
        """
        Request a new credential from the auth endpoint and persist it.

        The ``x-device-token`` header wins; otherwise the JSON body's ``token``
        field is used. An unparseable body counts as no token.

        Raises:
            AuthFailed: request failed or returned a non-success status
            NoTokenInResponse: neither header nor body carried a token
        """
        try:
            response = self.session.get(self.auth_url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise AuthFailed(f"auth request failed ({e})") from e

        if not response.ok:
            raise AuthFailed(
                f"auth request failed ({response.status_code})",
                status_code=response.status_code,
            )

        token = response.headers.get(TOKEN_HEADER)
        source = "header"
        if not token:
            source = "JSON"
            try:
                token = AuthResponse.model_validate(response.json()).token
            except ValueError:
                token = None

        if not token or not token.strip():
            raise NoTokenInResponse("no token in auth response")

        token = token.strip()
        self.save(token)
        logger.info(f"Obtained new token from {source}")
        return token

    def get(self) -> str:
        """Stored credential if present, else a freshly fetched one."""
        try:
            return self.load()
        except TokenNotFound:
            return self.fetch()

    def invalidate(self) -> None:
        """Delete the stored credential; a missing file is fine."""
        try:
            os.remove(self.token_file)
        except FileNotFoundError:
            pass
