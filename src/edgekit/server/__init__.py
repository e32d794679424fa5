"""ASGI server layer — request dispatch, error envelopes, response sending."""
