"""TriviaHub: a small multiple-choice quiz service."""
