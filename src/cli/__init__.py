"""Command-line tools for VectorDocs.

- ``python -m src.cli ingest --file PATH`` -- ingest a local PDF
- ``python -m src.cli search QUERY`` -- top-k semantic search
- ``python -m src.cli reset [--yes]`` -- delete the document collection
- ``python -m src.cli health`` -- check Ollama and ChromaDB reachability

Each command builds its own providers around a short-lived HTTP client
rather than going through the web application's lifespan.
"""
