"""
Agency Dashboard Backend Package.

FastAPI service layer for the agency sales dashboard. Aggregates call and
sales series into chart buckets, derives CPA and rate metrics, and serves
agent, state and vendor breakdown reports fetched from the upstream data API.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, upstream data client, errors and dependencies
    - models: Pydantic schemas and enums
    - services: Bucketing, merging, metrics, reporting and export logic
"""

__version__ = "1.0.0"
