"""
Services Package

Logic that sits behind the routers and is testable without HTTP:

- store.py: BookStore, the persistence gateway for books and authors
- validation.py: request body validation and the per-field error report
- security.py: JWT bearer token issue and verification
- rate_limiter.py: slowapi rate limiting
"""
