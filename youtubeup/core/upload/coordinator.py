"""
Upload coordinator.

Orchestrates session setup, probes and transfer attempts.
Depends on injected collaborators so each piece can be swapped in tests.
"""
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from ..api.config import UploaderConfig
from ..api.retry import RetryStrategy
from ..api.transport import Transport
from ..exceptions import ConfigurationError, UploadFailedError
from ..logging import get_logger
from ..session import SessionStore, SidecarSessionStore, UploadSession
from .models import (
    FatalFailure,
    ProbeComplete,
    ProbeError,
    ProbeOffset,
    ProbeResult,
    TransferOutcome,
    TransferSuccess,
    TransientFailure,
    UploadProgress,
    UploadResult,
    UploadState,
    VideoMetadata,
)
from .services import FileValidator, ProgressProber, TransferExecutor


logger = get_logger('youtubeup.upload.coordinator')

ProgressCallback = Callable[[UploadProgress], None]


@dataclass(frozen=True)
class _TransferFinished:
    outcome: TransferOutcome


@dataclass(frozen=True)
class _ProgressPolled:
    result: ProbeResult


class UploadCoordinator:
    """
    Coordinates one resumable upload.

    State machine:
        IDLE -> PROBING       resumed session
        IDLE -> TRANSFERRING  new session, from byte 0
        PROBING -> TRANSFERRING | SUCCEEDED | FAILED
        TRANSFERRING -> SUCCEEDED | RETRYING | FAILED
        RETRYING -> PROBING

    While a transfer runs, a timer task probes the session every
    poll_interval purely to report progress. Both tasks post immutable
    events to a queue that only the control loop reads; the queue and the
    timer are dropped as soon as the transfer task reports back.

    Example:
        >>> coordinator = UploadCoordinator(transport, progress_callback=print)
        >>> result = await coordinator.upload("talk.mp4", VideoMetadata(title="Talk"))
        >>> print(result.video_id)
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[UploaderConfig] = None,
        session_store: Optional[SessionStore] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        prober: Optional[ProgressProber] = None,
        executor: Optional[TransferExecutor] = None,
        progress_callback: Optional[ProgressCallback] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            transport: Authenticated transport shared by all requests
            config: Uploader configuration
            session_store: Session persistence (side-car files by default)
            retry_strategy: Decides which transfer failures are retried
            prober: Progress prober
            executor: Transfer executor
            progress_callback: Optional callback for progress updates

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self._config = (config or UploaderConfig.default()).validate()
        self._transport = transport
        self._store = session_store or SidecarSessionStore(self._config.timeout)
        self._retry = retry_strategy or self._config.retry.create_strategy()
        self._prober = prober or ProgressProber(transport, self._config.timeout)
        self._executor = executor or TransferExecutor(transport, self._config)
        self._validator = FileValidator()
        self._progress_callback = progress_callback
        self._state = UploadState.IDLE

    @property
    def state(self) -> UploadState:
        """Current state of the coordinator."""
        return self._state

    def _set_state(self, state: UploadState) -> None:
        logger.debug(f"State {self._state.value} -> {state.value}")
        self._state = state

    def _report(self, bytes_confirmed: int, total_bytes: int) -> None:
        if self._progress_callback:
            self._progress_callback(UploadProgress(bytes_confirmed, total_bytes))

    async def upload(
        self,
        file_path: Union[str, Path],
        metadata: Union[VideoMetadata, Mapping[str, Any]]
    ) -> UploadResult:
        """
        Upload a file, resuming a persisted session if there is one.

        Args:
            file_path: Source file
            metadata: Resource metadata, used only when a new session is opened

        Returns:
            Upload result

        Raises:
            ConfigurationError: If the file is unusable or changed size
            ProtocolError: If the session cannot be opened
            SessionError: If the session cannot be opened
            UploadFailedError: If the upload ends in the failed state
        """
        path, size = self._validator.validate(file_path)
        self._validator.validate_size(size)
        logger.info(f"Starting upload: {path.name} ({size / (1024 * 1024):.2f} MB)")

        session = self._store.open(path)
        if session is not None:
            if session.size != size:
                raise ConfigurationError(
                    f"{path} is {size} bytes but its session was opened for "
                    f"{session.size} bytes; remove {SidecarSessionStore.path_for(path)} to start over"
                )
            logger.info("Found an existing session, resuming")
            return await self.run(path, session, resumed=True)

        payload = metadata.to_dict() if isinstance(metadata, VideoMetadata) else dict(metadata)
        session = await self._store.create(
            self._transport,
            payload,
            size,
            self._config.upload_url,
            self._config.content_type
        )
        self._store.save(path, session)
        logger.info("Starting new upload")
        return await self.run(path, session, resumed=False)

    async def run(self, file_path: Path, session: UploadSession, resumed: bool = False) -> UploadResult:
        """
        Drive an open session to a terminal state.

        A resumed session is probed first; a new one starts at byte 0.

        Returns:
            Upload result on success

        Raises:
            UploadFailedError: On the failed terminal state
        """
        attempts = 0
        retries = 0
        start_offset = 0
        self._set_state(UploadState.PROBING if resumed else UploadState.TRANSFERRING)

        while True:
            if self._state is UploadState.PROBING:
                result = await self._prober.probe(session)

                if isinstance(result, ProbeComplete):
                    logger.info("Server reports the upload is already complete")
                    return self._succeed(file_path, session, None, resumed, attempts)

                if isinstance(result, ProbeError):
                    self._fail(f"Status probe failed: {result.error}", result)

                start_offset = result.next_byte
                logger.info(f"Resuming upload at byte {start_offset} of {session.size}")
                self._report(start_offset, session.size)
                self._set_state(UploadState.TRANSFERRING)

            elif self._state is UploadState.TRANSFERRING:
                attempts += 1
                outcome = await self._transfer_with_polling(file_path, session, start_offset)

                if isinstance(outcome, TransferSuccess):
                    return self._succeed(file_path, session, outcome.resource, resumed, attempts)

                if isinstance(outcome, TransientFailure) and self._retry.should_retry(outcome.kind):
                    self._set_state(UploadState.RETRYING)
                    continue

                self._fail(f"Upload failed: {outcome.error}", outcome)

            elif self._state is UploadState.RETRYING:
                retries += 1
                delay = self._retry.delay(retries)
                logger.warning(f"Connection lost, re-checking progress in {delay:g}s (retry {retries})")
                await self._retry.wait_async(retries)
                self._set_state(UploadState.PROBING)

            else:
                raise RuntimeError(f"Coordinator cannot run from state {self._state.value}")

    def _succeed(
        self,
        file_path: Path,
        session: UploadSession,
        resource: Optional[dict],
        resumed: bool,
        attempts: int
    ) -> UploadResult:
        self._set_state(UploadState.SUCCEEDED)
        self._report(session.size, session.size)
        self._store.discard(file_path)
        logger.info("Upload successful")
        return UploadResult(
            state=UploadState.SUCCEEDED,
            resource=resource,
            resumed=resumed,
            attempts=attempts
        )

    def _fail(self, message: str, outcome: Union[ProbeError, TransientFailure, FatalFailure]) -> None:
        failed_in = self._state
        self._set_state(UploadState.FAILED)
        logger.error(message)
        raise UploadFailedError(message, outcome=outcome, state=failed_in)

    async def _transfer_with_polling(
        self,
        file_path: Path,
        session: UploadSession,
        start_offset: int
    ) -> TransferOutcome:
        """Run one transfer attempt with the progress timer beside it."""
        events: asyncio.Queue = asyncio.Queue()
        transfer_task = asyncio.create_task(
            self._run_transfer(events, file_path, session, start_offset)
        )
        poll_task = asyncio.create_task(self._poll_progress(events, session))

        try:
            while True:
                event = await events.get()
                if isinstance(event, _TransferFinished):
                    return event.outcome
                self._apply_poll(event.result, session)
        finally:
            poll_task.cancel()
            try:
                await poll_task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Progress timer stopped: {e!r}")

            # Only reached undone if the control loop itself was cancelled
            if not transfer_task.done():
                transfer_task.cancel()
                try:
                    await transfer_task
                except asyncio.CancelledError:
                    pass

    async def _run_transfer(
        self,
        events: asyncio.Queue,
        file_path: Path,
        session: UploadSession,
        start_offset: int
    ) -> None:
        try:
            outcome = await self._executor.transfer(session, file_path, start_offset)
        except Exception as e:
            logger.exception("Unexpected error during transfer")
            outcome = FatalFailure(e)
        events.put_nowait(_TransferFinished(outcome))

    async def _poll_progress(self, events: asyncio.Queue, session: UploadSession) -> None:
        interval = self._config.retry.poll_interval
        while True:
            await asyncio.sleep(interval)
            events.put_nowait(_ProgressPolled(await self._prober.probe(session)))

    def _apply_poll(self, result: ProbeResult, session: UploadSession) -> None:
        if isinstance(result, ProbeOffset):
            self._report(result.next_byte, session.size)
        elif isinstance(result, ProbeComplete):
            self._report(session.size, session.size)
        else:
            logger.debug(f"Progress poll failed: {result.error}")
