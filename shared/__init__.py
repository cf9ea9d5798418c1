"""
Shared utilities for the GeoProxy gateway.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- circuit_breaker: Resilient external call protection
- base_service: FastAPI application scaffolding
- test_helpers: Factories and stubs shared by the test suites

Only test_helpers imports from service packages.
"""
