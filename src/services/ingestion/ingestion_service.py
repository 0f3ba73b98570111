"""Orchestrator for the PDF ingestion pipeline.

Pipeline stages: **extract -> chunk -> resolve collection -> embed -> store**.

The :class:`IngestionService` implements the **Orchestrator pattern**: it
coordinates the PDF extractor, the chunker, the embedding provider, the
collection provisioner and the vector store without any of them knowing
about each other.

Failure policy:

* An unreadable PDF (:class:`ExtractionError`) or an unusable collection
  (:class:`ProvisioningError`) aborts the whole upload.
* A chunk whose embedding or write fails is logged, recorded in the
  summary and skipped; the loop carries on with the next chunk.  The
  summary status stays ``"completed"`` so one bad chunk never fails an
  upload, and the per-chunk outcomes say exactly what was lost.

All dependencies are injected via constructor, so providers can be swapped
without changing this class.
"""

from __future__ import annotations

import asyncio
import re
import time
from typing import TYPE_CHECKING

import structlog

from src.models.document import ChunkOutcome, ChunkStatus, IngestionSummary
from src.services.collection_provisioner import CollectionProvisioner
from src.services.ingestion.chunker import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CHUNK_STRIDE,
    TextChunker,
)
from src.services.ingestion.pdf_extractor import PDFExtractor
from src.utils.errors import EmbeddingError, StoreWriteError

if TYPE_CHECKING:
    from src.config.settings import Settings
    from src.interfaces.embedding_provider import IEmbeddingProvider
    from src.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)

# ASCII digits with an optional sign; int() alone also takes "1_0" and non-ASCII digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _positive_int(value: int | str | None) -> int | None:
    """Return *value* as a positive int, or ``None`` if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not _INTEGER_RE.fullmatch(value):
            return None
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        return None
    return value


def normalize_chunk_params(
    chunk_size: int | str | None,
    chunk_stride: int | str | None,
    default_size: int = DEFAULT_CHUNK_SIZE,
    default_stride: int = DEFAULT_CHUNK_STRIDE,
) -> tuple[int, int]:
    """Validate caller-supplied chunk parameters, falling back to defaults.

    Anything that is not a positive integer (``None``, ``0``, ``-5``,
    ``"abc"``, ``"2.5"``) is ignored and the default is used instead.
    """
    size = _positive_int(chunk_size) or default_size
    stride = _positive_int(chunk_stride) or default_stride
    return size, stride


class IngestionService:
    """Orchestrates PDF ingestion: extract -> chunk -> embed -> store.

    Parameters
    ----------
    settings:
        Supplies the collection name, embedding model and chunk defaults.
    embedding_provider:
        Generates one embedding per chunk.
    vector_store:
        Persists one record per successfully embedded chunk.
    provisioner:
        Resolves the target collection (get-or-create) once per upload.
    extractor:
        Reads text out of the PDF.  Defaults to :class:`PDFExtractor`.
    """

    def __init__(
        self,
        settings: Settings,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        provisioner: CollectionProvisioner,
        extractor: PDFExtractor | None = None,
    ) -> None:
        self._collection_name = settings.collection_name
        self._model = settings.embedding_model
        self._default_size = settings.default_chunk_size
        self._default_stride = settings.default_chunk_stride
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._provisioner = provisioner
        self._extractor = extractor or PDFExtractor()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(
        self,
        file_path: str,
        filename: str,
        chunk_size: int | str | None = None,
        chunk_stride: int | str | None = None,
    ) -> IngestionSummary:
        """Ingest the PDF at *file_path*, stored under the name *filename*.

        Returns
        -------
        IngestionSummary
            Chunk parameters actually used plus one outcome per chunk.

        Raises
        ------
        ExtractionError
            If the PDF cannot be read; nothing is written.
        ProvisioningError
            If the collection cannot be resolved or holds vectors from a
            different model.
        """
        start = time.monotonic()
        size, stride = normalize_chunk_params(
            chunk_size, chunk_stride, self._default_size, self._default_stride
        )

        # Step 1: extract text.  PyMuPDF is synchronous, keep it off the loop.
        text = await asyncio.to_thread(self._extractor.extract, file_path)

        # Step 2: chunk.
        chunks = TextChunker(size, stride).chunk(text, filename)
        logger.info(
            "pdf_chunked",
            filename=filename,
            characters=len(text),
            num_chunks=len(chunks),
            chunk_size=size,
            chunk_stride=stride,
        )

        # Step 3: resolve the collection once for the whole upload.
        collection = await self._provisioner.resolve(self._collection_name)

        # Steps 4-5: embed and store each chunk, best effort.
        outcomes: list[ChunkOutcome] = []
        dimension_checked = False
        total = len(chunks)
        for chunk in chunks:
            try:
                embedding = await self._embedding_provider.embed(chunk.text, model=self._model)
            except EmbeddingError as exc:
                logger.warning(
                    "chunk_embedding_failed",
                    filename=filename,
                    chunk_num=chunk.chunk_num,
                    total=total,
                    error=str(exc),
                )
                outcomes.append(
                    ChunkOutcome(
                        chunk_num=chunk.chunk_num,
                        status=ChunkStatus.EMBEDDING_FAILED,
                        error=str(exc),
                    )
                )
                continue

            if not dimension_checked:
                CollectionProvisioner.check_dimension(collection, embedding)
                dimension_checked = True

            try:
                record_id = await self._vector_store.add(
                    collection.id, chunk.text, embedding, chunk.to_metadata()
                )
            except StoreWriteError as exc:
                logger.warning(
                    "chunk_store_failed",
                    filename=filename,
                    chunk_num=chunk.chunk_num,
                    total=total,
                    error=str(exc),
                )
                outcomes.append(
                    ChunkOutcome(
                        chunk_num=chunk.chunk_num,
                        status=ChunkStatus.STORE_FAILED,
                        error=str(exc),
                    )
                )
                continue

            outcomes.append(
                ChunkOutcome(
                    chunk_num=chunk.chunk_num,
                    status=ChunkStatus.STORED,
                    record_id=record_id,
                )
            )
            logger.debug("chunk_stored", filename=filename, chunk_num=chunk.chunk_num, total=total)

        summary = IngestionSummary(
            filename=filename,
            chunk_size=size,
            chunk_stride=stride,
            collection_id=collection.id,
            outcomes=outcomes,
            ingestion_time=round(time.monotonic() - start, 3),
        )
        logger.info(
            "ingestion_complete",
            filename=filename,
            total_chunks=summary.total_chunks,
            stored_chunks=summary.stored_chunks,
            failed_chunks=summary.failed_chunks,
            ingestion_time=summary.ingestion_time,
        )
        return summary
