"""
CloudMentor - AWS certification learning platform.

Subpackages:
- schemas: Pydantic entity and summary models
- gateway: record store access (in-memory, SQLite)
- classroom: catalog, assessments, progress
- mentor: AI mentor chat and transcription
- collaboration: study group rooms
- viewer: HTML/chart helpers for the Streamlit app
"""

__version__ = "0.1.0"
