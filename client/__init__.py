"""Access to the live talent database endpoint.

Only the latest selection may publish its result: selecting another class
clears the previous payload at once and turns any response still in flight
for an older selection into a no-op.
"""

import dataclasses
import logging
import threading
from concurrent.futures import Executor, Future

import requests
from pydantic import BaseModel, ValidationError

from calculator.config import CalculatorConfig
from talents.parsers.talent_api.models import TalentApiPayload

logger = logging.getLogger(__name__)


class TalentApiError(Exception):
    pass


class TalentApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: CalculatorConfig) -> "TalentApiClient":
        return cls(config.talent_api_url, timeout=config.request_timeout)

    def fetch(self, klass: str | None = None) -> TalentApiPayload:
        params = {"klass": klass} if klass else None
        try:
            response = self._session.get(
                self._base_url,
                params=params,
                timeout=self._timeout,
                headers={"Cache-Control": "no-store"},
            )
        except requests.RequestException as e:
            raise TalentApiError(f"Talent API request failed: {e}") from e
        if not response.ok:
            raise TalentApiError(f"Talent API HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError as e:
            raise TalentApiError("Talent API returned a non-JSON body") from e
        if not isinstance(body, dict):
            raise TalentApiError("Talent API returned an unexpected document")
        if body.get("error"):
            raise TalentApiError(str(body["error"]))
        try:
            return TalentApiPayload.model_validate(body)
        except ValidationError as e:
            raise TalentApiError(
                f"Talent API payload is malformed: {e.error_count()} errors"
            ) from e


class FetchState(BaseModel):
    klass: str | None = None
    payload: TalentApiPayload | None = None
    is_loading: bool = False
    error: str | None = None


@dataclasses.dataclass(frozen=True)
class RequestTicket:
    klass: str | None
    generation: int


class TalentApiSession:
    def __init__(self, client: TalentApiClient):
        self._client = client
        self._lock = threading.Lock()
        self._generation = 0
        self._state = FetchState()

    @property
    def state(self) -> FetchState:
        with self._lock:
            return self._state

    def begin(self, klass: str | None) -> RequestTicket:
        with self._lock:
            self._generation += 1
            # Same class keeps what is on screen, a new class starts blank
            payload = self._state.payload if klass == self._state.klass else None
            self._state = FetchState(klass=klass, payload=payload, is_loading=True)
            return RequestTicket(klass=klass, generation=self._generation)

    def _is_current(self, ticket: RequestTicket) -> bool:
        return ticket.generation == self._generation

    def complete(self, ticket: RequestTicket, payload: TalentApiPayload) -> bool:
        with self._lock:
            if not self._is_current(ticket):
                logger.debug("Discarding stale talent payload for %r", ticket.klass)
                return False
            self._state = FetchState(
                klass=ticket.klass, payload=payload, is_loading=False
            )
            return True

    def fail(self, ticket: RequestTicket, error: str) -> bool:
        with self._lock:
            if not self._is_current(ticket):
                logger.debug(
                    "Discarding stale talent error for %r: %s", ticket.klass, error
                )
                return False
            self._state = FetchState(
                klass=ticket.klass, payload=None, is_loading=False, error=error
            )
            return True

    def _run(self, ticket: RequestTicket) -> FetchState:
        try:
            payload = self._client.fetch(ticket.klass)
        except TalentApiError as e:
            logger.warning("Talent API fetch for %r failed: %s", ticket.klass, e)
            self.fail(ticket, str(e))
        else:
            self.complete(ticket, payload)
        return self.state

    def select(self, klass: str | None) -> FetchState:
        return self._run(self.begin(klass))

    def select_async(self, klass: str | None, executor: Executor) -> Future[FetchState]:
        ticket = self.begin(klass)
        return executor.submit(self._run, ticket)
