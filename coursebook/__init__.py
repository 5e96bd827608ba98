"""
Coursebook - Course Catalog API

A small catalog of courses behind an HTTP API, with mutating calls
gated by HTTP Basic credentials.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- auth: Credential extraction, verification and the uniform denial
- users: Registered users, looked up by email address
- storage: Course records in a single JSON document
- api: Request and response models
- config: Environment configuration
"""

__version__ = "1.0.0"
