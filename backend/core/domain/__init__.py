"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain error kinds that map cleanly to HTTP responses.
exception_handler  DRF exception handler rendering ``{"Errors": [...]}``.
access             Caller metadata, caller-type policy dispatch, tenant helpers.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidSearch
    from core.domain.access import CallerType, apply_caller_rule
"""
