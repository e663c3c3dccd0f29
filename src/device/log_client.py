"""
Submission of decibel readings to the logging endpoint.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import requests
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class LogPayload(BaseModel):
    """JSON body posted to the logging endpoint."""

    decibels: Union[int, float]


class SubmitOutcome(Enum):
    ACCEPTED = "accepted"
    UNAUTHORIZED = "unauthorized"  # caller must re-authenticate
    REJECTED = "rejected"


@dataclass
class SubmitResult:
    outcome: SubmitOutcome
    status_code: int
    decibels: Union[int, float]

    @property
    def needs_reauth(self) -> bool:
        return self.outcome is SubmitOutcome.UNAUTHORIZED


class LogClient:
    """Posts single readings with a bearer token."""

    def __init__(
        self,
        logs_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.logs_url = logs_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def submit(self, token: str, decibels: Union[int, float]) -> SubmitResult:
        """
        Send one reading.

        Transport errors propagate as ``requests.RequestException``; HTTP
        statuses are reported through the returned outcome.
        """
        payload = LogPayload(decibels=decibels)
        logger.debug(f"POST {self.logs_url} {payload.model_dump()}")
        response = self.session.post(
            self.logs_url,
            json=payload.model_dump(),
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )

        if response.ok:
            outcome = SubmitOutcome.ACCEPTED
        elif response.status_code == 401:
            outcome = SubmitOutcome.UNAUTHORIZED
        else:
            outcome = SubmitOutcome.REJECTED

        return SubmitResult(
            outcome=outcome, status_code=response.status_code, decibels=decibels
        )
