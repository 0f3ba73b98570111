"""Text chunking with overlapping fixed-width word windows.

Splits extracted document text into :class:`~src.models.document.Chunk`
objects of ``chunk_size`` words whose start offsets are ``chunk_stride``
words apart, so consecutive chunks share ``chunk_size - chunk_stride``
words of context.

Windowing rules:

* Words are runs of non-whitespace; any run of whitespace is one separator.
* The final window is clipped to the end of the text and may be short.
* Once a window reaches the last word, chunking stops, even if the stride
  would place another start before the end.

For ``N > 0`` words and ``stride <= size`` this yields
``ceil(max(0, N - size) / stride) + 1`` chunks; a wider stride skips words
and can end one window earlier, at ``ceil(N / stride)``.  Empty text yields
no chunks.
"""

from __future__ import annotations

import structlog

from src.models.document import Chunk

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_CHUNK_SIZE = 100
DEFAULT_CHUNK_STRIDE = 80


def split_into_windows(text: str, size: int, stride: int) -> list[str]:
    """Split *text* into overlapping windows of at most *size* words.

    Raises
    ------
    ValueError
        If *size* or *stride* is not a positive integer.
    """
    if size <= 0 or stride <= 0:
        raise ValueError(f"chunk size and stride must be positive, got {size} and {stride}")

    words = text.split()
    windows: list[str] = []
    for start in range(0, len(words), stride):
        end = min(start + size, len(words))
        windows.append(" ".join(words[start:end]))
        if end == len(words):
            break
    return windows


class TextChunker:
    """Splits text into overlapping word-window :class:`Chunk` objects.

    Parameters
    ----------
    chunk_size:
        Words per chunk (default 100).
    chunk_stride:
        Words between consecutive chunk starts (default 80).
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_stride: int = DEFAULT_CHUNK_STRIDE,
    ) -> None:
        if chunk_size <= 0 or chunk_stride <= 0:
            raise ValueError(
                f"chunk size and stride must be positive, got {chunk_size} and {chunk_stride}"
            )
        self._chunk_size = chunk_size
        self._chunk_stride = chunk_stride

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_stride(self) -> int:
        return self._chunk_stride

    def chunk(self, text: str, filename: str) -> list[Chunk]:
        """Split *text* into chunks numbered from 1, tagged with *filename*."""
        windows = split_into_windows(text, self._chunk_size, self._chunk_stride)
        chunks = [
            Chunk(chunk_num=index, text=window, filename=filename)
            for index, window in enumerate(windows, start=1)
        ]
        logger.debug(
            "chunking_complete",
            filename=filename,
            num_chunks=len(chunks),
            chunk_size=self._chunk_size,
            chunk_stride=self._chunk_stride,
        )
        return chunks
