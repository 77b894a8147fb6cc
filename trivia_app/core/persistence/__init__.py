"""Persistence backends for the trivia service."""

from .document_store import SESSIONS, USERS, DocumentStore, InMemoryDocumentStore

__all__ = ["DocumentStore", "InMemoryDocumentStore", "SESSIONS", "USERS"]
