import asyncio
import io
import os
import pathlib
import sys
from collections import defaultdict
from typing import Callable, Dict, TypeVar

import msgspec

from convergence.logging.config.logging_config import LoggingConfig
from convergence.logging.config.stream_type import StreamType
from convergence.logging.models import Entry, Log

T = TypeVar("T", bound=Entry)


DEFAULT_TEMPLATE = (
    "{timestamp} - {level} - {thread_id} - "
    "{filename}:{function_name}.{line_number} - {message}"
)


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._encoder = msgspec.json.Encoder()

        self._files: Dict[str, io.TextIOWrapper] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    async def initialize(self) -> None:
        async with self._init_lock:
            if self._initialized:
                return

            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(None, os.getcwd)

            if self._default_log_directory is None and self._config.directory:
                self._default_log_directory = self._config.directory

            if self._default_logfile:
                self._default_logfile_path = await self.open_file(
                    self._default_logfile,
                    directory=self._default_log_directory,
                )

            self._initialized = True
            self._closed = False

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
    ) -> str:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        logfile_path = self._to_logfile_path(filename, directory=directory)
        async with self._file_locks[logfile_path]:
            if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
                self._files[logfile_path] = await self._loop.run_in_executor(
                    None,
                    self._open_file,
                    logfile_path,
                )

        return logfile_path

    def _open_file(self, logfile_path: str) -> io.TextIOWrapper:
        path = pathlib.Path(logfile_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return open(path, "a", encoding="utf-8")

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ) -> str:
        if directory is None:
            directory = os.path.join(self._cwd or os.getcwd(), "logs")

        return os.path.join(directory, filename)

    async def log(
        self,
        entry: T | Log[T],
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ) -> None:
        if self._initialized is False:
            await self.initialize()

        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else "logs.json"
            directory = (
                str(logfile_path.parent.absolute())
                if is_logfile
                else str(logfile_path.absolute())
            )

        if template is None:
            template = self._default_template

        if filename or self._default_logfile_path:
            await self._log_to_file(
                entry,
                filename=filename,
                directory=directory,
                filter=filter,
            )

        else:
            await self._log(
                entry,
                template=template,
                filter=filter,
            )

    async def _log(
        self,
        entry_or_log: T | Log[T],
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ) -> None:
        log = self._to_log(entry_or_log)
        entry = log.entry

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if template is None:
            template = DEFAULT_TEMPLATE

        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        line = entry.to_template(
            template,
            context={
                "filename": log.filename,
                "function_name": log.function_name,
                "line_number": log.line_number,
                "thread_id": log.thread_id,
                "timestamp": log.timestamp,
            },
        )

        async with self._write_lock:
            stream.write(line + "\n")
            stream.flush()

    async def _log_to_file(
        self,
        entry_or_log: T | Log[T],
        filename: str | None = None,
        directory: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ) -> None:
        log = self._to_log(entry_or_log)

        if self._config.enabled(self._name, log.entry.level) is False:
            return

        if filter and filter(log.entry) is False:
            return

        if filename:
            logfile_path = await self.open_file(filename, directory=directory)

        else:
            logfile_path = self._default_logfile_path

        logfile = self._files[logfile_path]
        line = self._encoder.encode(log) + b"\n"

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._write_to_file,
                logfile,
                line.decode(),
            )

    def _write_to_file(self, logfile: io.TextIOWrapper, line: str) -> None:
        logfile.write(line)
        logfile.flush()

    def _to_log(self, entry_or_log: T | Log[T]) -> Log[T]:
        if isinstance(entry_or_log, Log):
            return entry_or_log

        frame = sys._getframe(3)
        code = frame.f_code
        return Log(
            entry=entry_or_log,
            filename=code.co_filename,
            function_name=code.co_name,
            line_number=frame.f_lineno,
        )

    async def close(self) -> None:
        if self._closed:
            return

        for logfile_path, logfile in list(self._files.items()):
            async with self._file_locks[logfile_path]:
                if logfile.closed is False:
                    await self._loop.run_in_executor(None, logfile.close)

        self._files.clear()
        self._default_logfile_path = None
        self._initialized = False
        self._closed = True
