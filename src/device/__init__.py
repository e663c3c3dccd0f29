"""
Mock decibel device: token handling, log submission and the run loop.
"""

from .config import DeviceConfig
from .errors import (
    DeviceError,
    TokenNotFound,
    TokenStorageError,
    AuthFailed,
    NoTokenInResponse,
)
from .token_manager import TokenManager
from .log_client import LogClient, LogPayload, SubmitOutcome, SubmitResult
from .mock_device import MockDevice

__all__ = [
    'DeviceConfig',
    'DeviceError',
    'TokenNotFound',
    'TokenStorageError',
    'AuthFailed',
    'NoTokenInResponse',
    'TokenManager',
    'LogClient',
    'LogPayload',
    'SubmitOutcome',
    'SubmitResult',
    'MockDevice',
]
