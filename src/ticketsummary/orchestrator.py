"""Runs one backend call off the input path with a busy indicator alongside it."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from .backends import BackendClient, create_backend
from .config import BackendSettings
from .document import RESULT_HEADING, append_result, error_document, processing_document

TICK_SECONDS = 0.1

BackendFactory = Callable[[BackendSettings], BackendClient]


@dataclass(frozen=True)
class RequestOutcome:
    """Result of one submission, consumed once by the state machine."""

    document: str
    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProgressIndicator(Protocol):
    def run(self, stop: threading.Event) -> None:
        """Animate until ``stop`` is set."""


class TickingIndicator:
    """Calls ``on_tick`` at a fixed interval until cancelled."""

    def __init__(self, on_tick: Callable[[], None], interval: float = TICK_SECONDS) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self.ticks = 0

    def run(self, stop: threading.Event) -> None:
        while not stop.wait(self._interval):
            self.ticks += 1
            self._on_tick()
        self._on_tick()


class NullIndicator:
    def run(self, stop: threading.Event) -> None:
        stop.wait()


class RequestOrchestrator:
    """Coordinates a backend call with a progress indicator.

    ``submit`` blocks its caller until the backend answers; the network call and the
    indicator each run on their own thread, and the indicator is cancelled as soon as
    the call returns.
    """

    def __init__(
        self,
        *,
        backend_factory: BackendFactory = create_backend,
        indicator: ProgressIndicator | None = None,
    ) -> None:
        self._backend_factory = backend_factory
        self.indicator: ProgressIndicator = indicator or NullIndicator()

    def submit(
        self,
        backend_name: str,
        settings: BackendSettings,
        prompt: str,
        document: str,
        *,
        on_start: Callable[[str], None] | None = None,
    ) -> RequestOutcome:
        if on_start is not None:
            on_start(processing_document(backend_name))

        stop = threading.Event()
        spinner = threading.Thread(target=self._run_indicator, args=(stop,), name="progress-indicator", daemon=True)
        logger.info(
            "request.start backend={} prompt_chars={} prompt_lines={}",
            backend_name,
            len(prompt),
            prompt.count("\n") + 1,
        )
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="backend-call") as executor:
            future = executor.submit(self._call, settings, prompt)
            spinner.start()
            try:
                text = future.result()
            except Exception as exc:
                logger.opt(exception=exc).error("request.failed backend={}", backend_name)
                return RequestOutcome(document=error_document(backend_name, str(exc)), error=str(exc))
            finally:
                stop.set()
                spinner.join()

        logger.info("request.completed backend={} response_chars={}", backend_name, len(text))
        return RequestOutcome(document=append_result(document, RESULT_HEADING, text), text=text)

    def _call(self, settings: BackendSettings, prompt: str) -> str:
        client = self._backend_factory(settings)
        return client.generate(prompt)

    def _run_indicator(self, stop: threading.Event) -> None:
        try:
            self.indicator.run(stop)
        except Exception:
            logger.exception("request.indicator.error")
