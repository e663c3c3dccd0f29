#!/usr/bin/env python3
"""
Mock decibel device.

Authenticates once, then on a fixed period generates a reading and posts it to
the logging endpoint, refreshing the credential whenever the endpoint answers
401. Cycles run strictly one after another inside a single loop.

Usage:
  mock-device sine
  mock-device uniform --base-url http://127.0.0.1:3010 --interval 1
"""

import argparse
import logging
import signal
import sys
import threading
import time
from typing import Callable, Optional

import requests
from pydantic import ValidationError

from simulation import make_generator
from simulation.decibel_simulation import GENERATORS

from .config import DeviceConfig
from .errors import DeviceError
from .log_client import LogClient, SubmitOutcome, SubmitResult
from .token_manager import TokenManager

logger = logging.getLogger(__name__)


class MockDevice:
    """Run-loop context: owns the credential, generator and clients."""

    def __init__(
        self,
        generator,
        token_manager: TokenManager,
        log_client: LogClient,
        interval: float = 1.0,
        auth_backoff_initial: float = 1.0,
        auth_backoff_max: float = 30.0,
        auth_max_attempts: int = 0,
        sleep: Optional[Callable[[float], object]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.generator = generator
        self.token_manager = token_manager
        self.log_client = log_client
        self.interval = interval
        self.auth_backoff_initial = auth_backoff_initial
        self.auth_backoff_max = auth_backoff_max
        self.auth_max_attempts = auth_max_attempts
        self.clock = clock

        self._stop_event = threading.Event()
        # stop() interrupts any pending sleep
        self.sleep = sleep or self._stop_event.wait

        self.token: Optional[str] = None
        self.message_count = 0

    @classmethod
    def from_config(
        cls,
        config: DeviceConfig,
        mode: str,
        session: Optional[requests.Session] = None,
    ) -> "MockDevice":
        session = session or requests.Session()
        token_manager = TokenManager(
            config.token_file,
            config.auth_url,
            session=session,
            timeout=config.request_timeout,
        )
        log_client = LogClient(
            config.logs_url, session=session, timeout=config.request_timeout
        )
        return cls(
            make_generator(mode),
            token_manager,
            log_client,
            interval=config.interval_for(mode),
            auth_backoff_initial=config.auth_backoff_initial,
            auth_backoff_max=config.auth_backoff_max,
            auth_max_attempts=config.auth_max_attempts,
        )

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self):
        """Ask the loop to exit after the current cycle."""
        self._stop_event.set()

    def authenticate(self) -> Optional[str]:
        """
        Obtain a credential before entering steady state.

        Retries with exponential backoff. Once ``auth_max_attempts`` attempts
        have failed (0 means never give up) the last error is raised.

        Returns:
            The credential, or None if stopped while waiting to retry
        """
        attempt = 0
        delay = self.auth_backoff_initial
        while True:
            attempt += 1
            try:
                self.token = self.token_manager.get()
                return self.token
            except DeviceError as e:
                if self.auth_max_attempts and attempt >= self.auth_max_attempts:
                    logger.error(f"Authentication failed after {attempt} attempts: {e}")
                    raise
                logger.error(
                    f"Authentication attempt {attempt} failed: {e}; retrying in {delay:.1f}s"
                )

            self.sleep(delay)
            if self.stopped:
                return None
            delay = min(delay * 2, self.auth_backoff_max)

    def run_cycle(self) -> Optional[SubmitResult]:
        """
        Generate one reading and submit it.

        Never raises: failures are logged and the loop carries on with the
        credential it had.
        """
        try:
            if self.token is None:
                try:
                    self.token = self.token_manager.get()
                except DeviceError as e:
                    logger.error(f"No credential available, skipping cycle: {e}")
                    return None

            decibels = self.generator.next_decibels()
            result = self.log_client.submit(self.token, decibels)
            self.handle_result(result)
            return result
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            return None

    def handle_result(self, result: SubmitResult):
        if result.outcome is SubmitOutcome.ACCEPTED:
            self.message_count += 1
            logger.info(f"Sent {{ decibels: {result.decibels} }}")
        elif result.needs_reauth:
            logger.warning("Token rejected, refreshing")
            self.token_manager.invalidate()
            self.token = None
            try:
                self.token = self.token_manager.fetch()
            except DeviceError as e:
                logger.error(f"Token refresh failed: {e}")
        else:
            logger.error(f"Log post failed ({result.status_code})")

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Authenticate, then run cycles until stopped.

        Each cycle starts ``interval`` seconds after the previous one started,
        or immediately if that one overran.

        Returns:
            Number of readings accepted by the server
        """
        if self.token is None and self.authenticate() is None:
            return self.message_count

        logger.info(f"Starting mock device, one reading every {self.interval}s")

        cycles = 0
        while not self.stopped:
            started = self.clock()
            self.run_cycle()
            cycles += 1

            if max_cycles is not None and cycles >= max_cycles:
                break

            elapsed = self.clock() - started
            self.sleep(max(0.0, self.interval - elapsed))

        return self.message_count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mock decibel IoT device")
    parser.add_argument(
        "mode",
        choices=sorted(GENERATORS),
        help="Signal to send: smooth noisy sine wave or uniform random integers",
    )
    parser.add_argument("--base-url", help="Server address (default: DEVICE_BASE_URL)")
    parser.add_argument("--token-file", help="Where the device token is stored")
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between readings (default: 0.1 for sine, 1.0 for uniform)",
    )
    parser.add_argument("--timeout", type=float, help="HTTP request timeout in seconds")
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO")
    parser.add_argument(
        "--max-cycles", type=int, help="Stop after this many cycles (default: run forever)"
    )
    return parser


def parse_args(argv=None):
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def build_config(args) -> DeviceConfig:
    """
    Environment config with command line overrides applied.

    Raises:
        pydantic.ValidationError: a value is out of range or malformed
    """
    return DeviceConfig.from_env().with_overrides(
        base_url=args.base_url,
        token_file=args.token_file,
        interval=args.interval,
        request_timeout=args.timeout,
        log_level=args.log_level,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = build_config(args)
    except ValidationError as e:
        parser.error(f"invalid configuration\n{e}")

    # Configure logging
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = requests.Session()
    device = MockDevice.from_config(config, args.mode, session=session)

    def shutdown_handler(sig, frame):
        logger.info(f"Shutting down... {device.message_count} messages sent.")
        device.stop()
        # A second signal terminates immediately
        signal.signal(signal.SIGINT, signal.default_int_handler)
        signal.signal(signal.SIGTERM, signal.SIG_DFL)

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    logger.info(f"Posting {args.mode} readings to {config.logs_url}")
    try:
        device.run(max_cycles=args.max_cycles)
    except DeviceError as e:
        logger.error(f"Could not authenticate device: {e}")
        return 1
    finally:
        session.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
