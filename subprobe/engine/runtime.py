from __future__ import annotations

"""Core scanning engine for subprobe.

This module contains the runtime used by both CLI and Python API:
- the `Scanner` aggregate (result store, progress stream, worker pool)
- background helpers (`Scanner.start` / `Scanner.wait`)
- the synchronous `SUBPROBE` entrypoint

Keep logic in this file side-effect free where possible, because it is imported
from both `subprobe/cli.py` and external user scripts.
"""

import logging
import queue
import sys
import threading
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from dotenv import load_dotenv

from ..errors import LookupFailure
from .models import ValidationResult, ValidationStatus, WildcardSignature
from .probes import DEFAULT_HTTP_TIMEOUT, ReachabilityProbe, ResolverProbe
from .store import PROGRESS_BUFFER, ProgressStream, ResultStore
from .validator import Validator
from .wildcard import detect_wildcard
from .wordlist import Wordlist

load_dotenv()

DEFAULT_WORKERS = 10

logger = logging.getLogger("subprobe")
logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s", "%H:%M:%S"))
    logger.addHandler(handler)


def fmt_td(td: Optional[timedelta]) -> str:
    if td is None:
        return "-"
    total_seconds = int(td.total_seconds())
    hours, rem = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _worker_count(value: Any) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return DEFAULT_WORKERS
    return count if count > 0 else DEFAULT_WORKERS


class Scanner:
    """Validate candidate labels against one target domain.

    One instance per scan. Workers share a single `ResultStore` and a single
    `ProgressStream`; the wildcard signature is computed once before any
    worker starts and only read afterwards.

    `resolver` and `prober` may be injected (tests, custom transports);
    otherwise they are built from `dns_server` / `timeout` and the HTTP
    client is closed when the scan ends.
    """

    def __init__(
        self,
        target_domain: str,
        dns_server: Optional[str] = None,
        timeout: Optional[float] = None,
        resolver: Optional[ResolverProbe] = None,
        prober: Optional[ReachabilityProbe] = None,
        progress_buffer: int = PROGRESS_BUFFER,
    ):
        self.target_domain = target_domain
        self.dns_server = dns_server
        self.timeout = timeout
        self.resolver = resolver
        self.prober = prober
        self.results = ResultStore()
        self.wildcard: Optional[WildcardSignature] = None
        self._progress = ProgressStream(progress_buffer)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._outcome: Dict[str, Any] = {}
        self._used = False
        self._used_lock = threading.Lock()

    def snapshot(self) -> List[ValidationResult]:
        return self.results.snapshot()

    def successful(self) -> List[ValidationResult]:
        return self.results.successful()

    def progress(self) -> Iterator[str]:
        return iter(self._progress)

    def stop(self) -> None:
        """Ask workers to stop taking new candidates.

        In-flight probes are allowed to finish; `run` still waits for every
        worker before reporting completion.
        """
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def _emit_found(self, result: ValidationResult) -> None:
        self._progress.emit(
            f"Found subdomain: {result.fqdn(self.target_domain)} ({result.ip}) - {result.status.value}"
        )

    def _check_wildcard(self, resolver: ResolverProbe) -> WildcardSignature:
        self._progress.emit("Checking for wildcard DNS...")
        signature = detect_wildcard(self.target_domain, resolver)
        if signature.has_wildcard:
            ips = sorted(signature.ips)
            logger.debug("Wildcard DNS on %s: %s", self.target_domain, ", ".join(ips))
            self._progress.emit(f"Wildcard DNS detected, IPs: {ips}")
        else:
            self._progress.emit("No wildcard DNS detected")
        return signature

    def run(
        self,
        candidates: Sequence[str],
        workers: Any = DEFAULT_WORKERS,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        """Validate every candidate with a fixed pool of worker threads.

        Flow:
        1. wildcard detection on the caller's thread
        2. pre-fill a work queue, one end marker per worker
        3. start workers and join them all
        4. emit completion and close the progress stream

        Blocks until every worker has exited. Progress messages block while
        the stream buffer is full, so something must consume `progress()`
        when the candidate set is large.

        Duplicate candidates are validated once. A Scanner runs one scan;
        a second call raises `RuntimeError`.
        """
        with self._used_lock:
            if self._used:
                raise RuntimeError("Scanner already used")
            self._used = True

        items = list(dict.fromkeys(candidates))
        worker_count = _worker_count(workers)

        prober: Optional[ReachabilityProbe] = None
        try:
            if not items:
                raise ValueError("No candidates to scan")
            resolver = self.resolver or ResolverProbe(self.dns_server, self.timeout)
            prober = self.prober or ReachabilityProbe(timeout=DEFAULT_HTTP_TIMEOUT)
            signature = self._check_wildcard(resolver)
            self.wildcard = signature
            validator = Validator(self.target_domain, resolver, prober)

            work: "queue.Queue[Optional[str]]" = queue.Queue(maxsize=len(items) + worker_count)
            for item in items:
                work.put_nowait(item)
            for _ in range(worker_count):
                work.put_nowait(None)

            total = len(items)
            done = 0
            done_lock = threading.Lock()

            def worker() -> None:
                nonlocal done
                while True:
                    candidate = work.get()
                    if candidate is None:
                        return
                    if self._stop.is_set():
                        continue
                    try:
                        result = validator.validate(candidate)
                    except Exception as exc:
                        logger.warning("Validation crashed for %s: %s", candidate, exc)
                        result = ValidationResult(
                            subdomain=candidate,
                            status=ValidationStatus.FAILED,
                            error=LookupFailure(
                                f"{candidate}.{self.target_domain}", f"{exc.__class__.__name__}: {exc}"
                            ),
                        )

                    if signature.matches(result):
                        logger.debug("Dropped wildcard match %s (%s)", candidate, result.ip)
                    else:
                        self.results.append(result)
                        if result.ok:
                            self._emit_found(result)

                    with done_lock:
                        done += 1
                        if progress_callback:
                            try:
                                progress_callback(done, total)
                            except Exception as exc:
                                logger.warning("Progress callback failed at %d/%d: %s", done, total, exc)

            threads = [
                threading.Thread(target=worker, name=f"subprobe-worker-{idx}", daemon=True)
                for idx in range(worker_count)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            if self._stop.is_set():
                self._progress.emit("Scan stopped")
            logger.debug(
                "Scan of %s finished: %d stored, %d successful",
                self.target_domain,
                len(self.results),
                len(self.results.successful()),
            )
            self._progress.emit("Scan completed")
        finally:
            if prober is not None and self.prober is None:
                prober.close()
            self._progress.close()

    def start(
        self,
        candidates: Sequence[str],
        workers: Any = DEFAULT_WORKERS,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> threading.Thread:
        """Run the scan on a helper thread so the caller can drain `progress()`."""

        def target() -> None:
            try:
                self.run(candidates, workers, progress_callback)
            except Exception as exc:
                self._outcome["error"] = exc

        self._thread = threading.Thread(target=target, name="subprobe-scan", daemon=True)
        self._thread.start()
        return self._thread

    def wait(self, timeout: Optional[float] = None) -> None:
        """Join the helper thread started by `start` and re-raise its error."""
        if self._thread is not None:
            self._thread.join(timeout)
        if "error" in self._outcome:
            raise self._outcome.pop("error")


def SUBPROBE(
    domain: str,
    candidates: Optional[Iterable[str]] = None,
    wordlist: Optional[str] = None,
    threads: Optional[int] = None,
    dns: Optional[str] = None,
    timeout: Optional[float] = None,
    include_failed: bool = False,
) -> List[ValidationResult]:
    """Public synchronous Python API entrypoint.

    Example:
    `SUBPROBE("example.com", threads=20)`
    """
    items = list(candidates) if candidates is not None else Wordlist(wordlist).load()
    scanner = Scanner(domain, dns_server=dns, timeout=timeout)
    scanner.start(items, threads or DEFAULT_WORKERS)
    for message in scanner.progress():
        logger.debug(message)
    scanner.wait()
    return scanner.snapshot() if include_failed else scanner.successful()
