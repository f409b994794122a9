"""Live attendance session for one signed-in employee.

The session keeps three live subscriptions (profile, assigned location,
today's record) and recomputes the day status on every emission. Actions wait
for the biometric prompt, then the GPS fix, before committing one write.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import date_id, now_local
from ..core.enums import AttendanceAction
from ..core.exceptions import ActionInProgress, AuthenticationFailed, DomainError, SchemaError, ValidationError
from ..locations.model import location_from_document
from ..locations.repository import LocationRepository
from ..users.model import user_from_document
from ..users.repository import UserRepository
from ..verification.collaborators import BiometricAuthenticator, BiometricResult, LocationProvider, LocationResult
from .model import AttendanceCommit, record_from_document
from .repository import AttendanceRepository
from .state_machine import AttendanceStateMachine, DayStatus, evaluate

logger = logging.getLogger(__name__)


class InFlightGuard:
    """At most one attendance action in flight per employee."""

    def __init__(self):
        self._lock = threading.Lock()
        self._busy: set[str] = set()

    def acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._busy:
                return False
            self._busy.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._busy.discard(key)


class _ActionRun:
    def __init__(self, action: AttendanceAction, key: str, guard: InFlightGuard):
        self.action = action
        self.result: "Future[AttendanceCommit]" = Future()
        self._key = key
        self._guard = guard
        self._finished = False

    def _finish(self) -> bool:
        if self._finished:
            return False
        self._finished = True
        self._guard.release(self._key)
        return True

    def succeed(self, commit: AttendanceCommit) -> None:
        if self._finish() and not self.result.done():
            self.result.set_result(commit)

    def fail(self, error: BaseException) -> None:
        if self._finish() and not self.result.done():
            self.result.set_exception(error)

    def abandon(self) -> None:
        if self._finish():
            self.result.cancel()


def _outcome(future: Future, on_error):
    if future.cancelled():
        return on_error("cancelled")
    error = future.exception()
    if error is not None:
        return on_error(str(error) or type(error).__name__)
    return future.result()


class AttendanceSession:
    def __init__(
        self,
        uid: str,
        *,
        users: UserRepository,
        locations: LocationRepository,
        attendance: AttendanceRepository,
        state_machine: AttendanceStateMachine,
        guard: InFlightGuard,
        clock: Callable[[], datetime] = now_local,
        on_change: Optional[Callable[[DayStatus], None]] = None,
    ):
        self._uid = uid
        self._users = users
        self._locations = locations
        self._attendance = attendance
        self._machine = state_machine
        self._guard = guard
        self._clock = clock
        self._on_change = on_change

        self._lock = threading.RLock()
        self._closed = False
        self._started = False
        self._user = None
        self._location = None
        self._record = None
        self._status = evaluate(None, None, None)
        self._pending: Optional[_ActionRun] = None

        self._user_sub = None
        self._location_sub = None
        self._location_key: Optional[str] = None
        self._record_sub = None
        self._record_key: Optional[tuple[str, str]] = None

    # ----- lifecycle -----

    def start(self) -> "AttendanceSession":
        with self._lock:
            if self._closed:
                raise ValidationError("Session is closed")
            if not self._started:
                self._started = True
                self._user_sub = self._users.listen(self._uid, self._on_user)
        return self

    def close(self) -> None:
        """Tear down; verification results that arrive later are ignored."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for sub in (self._user_sub, self._location_sub, self._record_sub):
                if sub is not None:
                    sub.cancel()
            pending, self._pending = self._pending, None
        if pending is not None:
            logger.info("Session for %s closed with %s pending; result ignored", self._uid, pending.action.value)
            pending.abandon()

    def __enter__(self) -> "AttendanceSession":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def status(self) -> DayStatus:
        with self._lock:
            return self._status

    @property
    def user(self):
        with self._lock:
            return self._user

    # ----- live inputs -----

    def _on_user(self, doc) -> None:
        with self._lock:
            if self._closed:
                return
            try:
                self._user = user_from_document(self._uid, doc) if doc is not None else None
            except SchemaError:
                logger.exception("Unreadable profile for %s", self._uid)
                self._user = None
            self._bind_location()
            self._bind_record()
            self._recompute()

    def _on_location(self, doc) -> None:
        with self._lock:
            if self._closed:
                return
            try:
                self._location = location_from_document(self._location_key, doc) if doc is not None else None
            except SchemaError:
                logger.exception("Unreadable location %s", self._location_key)
                self._location = None
            self._recompute()

    def _on_record(self, doc) -> None:
        with self._lock:
            if self._closed:
                return
            try:
                self._record = record_from_document(doc) if doc is not None else None
            except SchemaError:
                logger.exception("Unreadable attendance record %s", self._record_key)
                self._record = None
            self._recompute()

    def _bind_location(self) -> None:
        wanted = self._user.assigned_location_id if self._user else None
        if wanted == self._location_key and (wanted is None or self._location_sub is not None):
            return
        if self._location_sub is not None:
            self._location_sub.cancel()
            self._location_sub = None
        self._location_key = wanted
        self._location = None
        if wanted:
            self._location_sub = self._locations.listen(wanted, self._on_location)

    def _record_day(self, employee_id: str) -> str:
        """Day of the record actions apply to.

        An open record stays current past midnight so it can still be
        checked out; otherwise the session moves to today.
        """
        now = self._clock()
        bound = self._record
        if bound is not None and bound.employee_id == employee_id and not bound.is_completed:
            return bound.date_id

        today = date_id(now)
        if self._attendance.get_for_employee_and_date(employee_id, today) is None:
            previous = self._attendance.get_for_employee_and_date(employee_id, date_id(now - timedelta(days=1)))
            if previous is not None and not previous.is_completed:
                return previous.date_id
        return today

    def _bind_record(self) -> None:
        employee_id = self._user.employee_id if self._user else None
        wanted = (employee_id, self._record_day(employee_id)) if employee_id else None
        if wanted == self._record_key and (wanted is None or self._record_sub is not None):
            return
        if self._record_sub is not None:
            self._record_sub.cancel()
            self._record_sub = None
        self._record_key = wanted
        self._record = None
        if wanted:
            self._record_sub = self._attendance.listen(wanted[0], wanted[1], self._on_record)

    def _recompute(self) -> None:
        self._status = evaluate(self._user, self._location, self._record)
        if self._on_change is not None:
            self._on_change(self._status)

    # ----- actions -----

    def start_action(
        self,
        action: AttendanceAction,
        biometric: BiometricAuthenticator,
        locator: LocationProvider,
    ) -> "Future[AttendanceCommit]":
        """Run biometric then GPS verification and commit on success.

        Returns a future resolving to the applied commit, failing with an
        ``AttendanceError``, or cancelled if the session closes first.
        """
        action = AttendanceAction(action)
        with self._lock:
            if self._closed:
                raise ValidationError("Session is closed")
            # Day may have rolled over since the record subscription was bound.
            # An open record from before midnight stays bound for check-out.
            self._bind_record()
            self._machine.check_preconditions(action, user=self._user, location=self._location, record=self._record)
            if not self._guard.acquire(self._uid):
                raise ActionInProgress("Another attendance action is already in progress")
            run = _ActionRun(action, self._uid, self._guard)
            self._pending = run

        try:
            bio_future = biometric.authenticate()
        except Exception as e:
            bio_future = Future()
            bio_future.set_exception(e)

        bio_future.add_done_callback(lambda f: self._after_biometric(run, f, locator))
        return run.result

    def perform(
        self,
        action: AttendanceAction,
        biometric: BiometricAuthenticator,
        locator: LocationProvider,
        *,
        timeout: Optional[float] = None,
    ) -> AttendanceCommit:
        return self.start_action(action, biometric, locator).result(timeout=timeout)

    def _after_biometric(self, run: _ActionRun, future: Future, locator: LocationProvider) -> None:
        # Runs as a future callback, where a raised exception would be lost.
        try:
            if self._closed:
                self._settle(run)
                return

            result = _outcome(future, BiometricResult.error)
            if not isinstance(result, BiometricResult):
                raise TypeError(f"Biometric prompt returned {type(result).__name__}, not BiometricResult")
            if not result.succeeded:
                logger.warning("%s rejected for %s: biometric %s", run.action.value, self._uid, result.outcome.value)
                self._settle(run, error=AuthenticationFailed(result.message or "Biometric verification failed"))
                return

            try:
                loc_future = locator.get_current_location()
            except Exception as e:
                loc_future = Future()
                loc_future.set_exception(e)
        except Exception as e:
            logger.exception("%s failed for %s", run.action.value, self._uid)
            self._settle(run, error=e)
            return

        loc_future.add_done_callback(lambda f: self._after_location(run, result, f))

    def _after_location(self, run: _ActionRun, biometric: BiometricResult, future: Future) -> None:
        location_result: LocationResult = _outcome(future, LocationResult.failure)
        commit = None
        error: Optional[BaseException] = None
        with self._lock:
            if self._closed:
                abandoned = True
            else:
                abandoned = False
                try:
                    commit = self._machine.attempt_action(
                        run.action,
                        user=self._user,
                        location=self._location,
                        record=self._record,
                        biometric=biometric,
                        location_result=location_result,
                        now=self._clock(),
                    )
                    self._attendance.apply(commit)
                except DomainError as e:
                    logger.warning("%s rejected for %s: %s", run.action.value, self._uid, e)
                    commit, error = None, e
                except Exception as e:
                    logger.exception("%s failed for %s", run.action.value, self._uid)
                    commit, error = None, e

        if abandoned:
            self._settle(run)
        elif error is not None:
            self._settle(run, error=error)
        else:
            logger.info("%s committed for %s (%s)", run.action.value, self._uid, commit.record_id)
            self._settle(run, commit=commit)

    def _settle(self, run: _ActionRun, *, commit: Optional[AttendanceCommit] = None, error: Optional[BaseException] = None) -> None:
        with self._lock:
            if self._pending is run:
                self._pending = None
        if commit is not None:
            run.succeed(commit)
        elif error is not None:
            run.fail(error)
        else:
            run.abandon()
