from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ValidationError(DomainError):
    """Invalid caller input (chain id or credential)."""


class ConfigurationError(DomainError):
    """Endpoint missing or not fully resolved for the chain."""


class SubgraphError(DomainError):
    """Base for failures talking to the subgraph."""


class TransportError(SubgraphError):
    """Non-success HTTP status or transport failure."""


class RequestTimeoutError(SubgraphError, TimeoutError):
    """Subgraph request exceeded the configured timeout."""


class QueryError(SubgraphError):
    """Subgraph answered with GraphQL errors."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("Subgraph query failed: " + " | ".join(self.messages))


class SchemaError(SubgraphError):
    """Well-formed response missing an expected field."""


class PaginationStallError(DomainError):
    """Pagination cursor did not advance between pages."""
