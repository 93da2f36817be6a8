"""
Bounded in-memory byte pipe between the CSV encoder and the uploader.

The writer blocks while ``max_buffer_size`` bytes are waiting, and the
reader blocks until it has what it asked for (or EOF). Either side can
abort the pipe, which wakes up the other side with PipeClosedError.
"""

import threading
from collections import deque
from typing import Optional


class PipeClosedError(Exception):
    """Raised on the other end of a pipe that has been aborted or closed."""


class ReportPipe:
    """
    File-like (read side) pipe shared by two threads.
    
    Not seekable: upload libraries must stream it with unknown length.
    """
    
    def __init__(self, max_buffer_size: int = 64 * 1024):
        if max_buffer_size <= 0:
            raise ValueError("max_buffer_size must be positive")
        self.max_buffer_size = max_buffer_size
        self._chunks = deque()
        self._buffered = 0
        self._closed = False
        self._error: Optional[BaseException] = None
        self._condition = threading.Condition()
    
    @property
    def error(self) -> Optional[BaseException]:
        return self._error
    
    @property
    def at_eof(self) -> bool:
        """True once the writer closed the pipe and everything was read."""
        with self._condition:
            return self._closed and self._buffered == 0
    
    # Writer side
    
    def write(self, data: bytes) -> int:
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data:
            return 0
        with self._condition:
            while self._buffered >= self.max_buffer_size and self._error is None:
                self._condition.wait()
            self._raise_if_aborted()
            if self._closed:
                raise PipeClosedError("write to a closed pipe")
            self._chunks.append(bytes(data))
            self._buffered += len(data)
            self._condition.notify_all()
        return len(data)
    
    def close(self) -> None:
        """Signal EOF to the reader."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()
    
    def abort(self, error: BaseException) -> None:
        """Break the pipe. The first error wins; buffered data is dropped."""
        with self._condition:
            if self._error is None:
                self._error = error
            self._chunks.clear()
            self._buffered = 0
            self._condition.notify_all()
    
    # Reader side
    
    def readable(self) -> bool:
        return True
    
    def seekable(self) -> bool:
        return False
    
    def writable(self) -> bool:
        return False
    
    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes, blocking until they are all there.
        
        Fewer bytes are only returned at EOF; ``b""`` means EOF.
        ``size < 0`` reads until EOF.
        """
        result = bytearray()
        with self._condition:
            while size < 0 or len(result) < size:
                self._raise_if_aborted()
                if self._chunks:
                    wanted = None if size < 0 else size - len(result)
                    result += self._take(wanted)
                    self._condition.notify_all()
                elif self._closed:
                    break
                else:
                    self._condition.wait()
        return bytes(result)
    
    def _take(self, wanted: Optional[int]) -> bytes:
        chunk = self._chunks.popleft()
        if wanted is not None and len(chunk) > wanted:
            self._chunks.appendleft(chunk[wanted:])
            chunk = chunk[:wanted]
        self._buffered -= len(chunk)
        return chunk
    
    def _raise_if_aborted(self) -> None:
        if self._error is not None:
            raise PipeClosedError(f"pipe aborted: {self._error!r}") from self._error
