"""Aggregate application use cases."""

from .authorization import AuthorizationGate, authenticate_credential
from .mutations import run_gated_mutation
from .permissions import assign_project_permissions

__all__ = [
    "AuthorizationGate",
    "assign_project_permissions",
    "authenticate_credential",
    "run_gated_mutation",
]
