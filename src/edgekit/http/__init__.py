"""HTTP primitives — the abstract request/response objects the pipeline works on."""
