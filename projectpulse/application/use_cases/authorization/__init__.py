"""Use cases for authenticating callers and checking their capabilities."""

from .authenticate import authenticate_credential
from .gate import AuthorizationGate

__all__ = ["AuthorizationGate", "authenticate_credential"]
