"""PDF ingestion pipeline for the VectorDocs collection.

Orchestrates the pipeline: **extract -> chunk -> embed -> store**.

1. **Extract** (pdf_extractor.py / PDFExtractor) -- PyMuPDF reads every
   page's text layer into one string.

2. **Chunk** (chunker.py / TextChunker) -- Splits the text into
   overlapping fixed-width word windows (default 100 words, stride 80).

3. **Embed** (via IEmbeddingProvider) -- One embedding per chunk.

4. **Store** (via IVectorStoreProvider) -- One record per embedded chunk,
   tagged with the source filename and chunk number.

The IngestionService class orchestrates all four stages.
"""

from src.services.ingestion.chunker import TextChunker, split_into_windows
from src.services.ingestion.ingestion_service import IngestionService, normalize_chunk_params
from src.services.ingestion.pdf_extractor import PDFExtractor

__all__ = [
    "IngestionService",
    "PDFExtractor",
    "TextChunker",
    "normalize_chunk_params",
    "split_into_windows",
]
