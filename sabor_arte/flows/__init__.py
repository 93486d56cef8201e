"""
Request flows. Each one talks only to the injected auth service and row
store, and reports failures as storefront errors.
"""

from sabor_arte.flows.gateway import CredentialGateway, Identity, parse_bearer_token
from sabor_arte.flows.accounts import LoginFlow, RegistrationFlow
from sabor_arte.flows.orders import OrderSubmissionFlow
from sabor_arte.flows.history import OrderHistoryReader
from sabor_arte.flows.menu import FALLBACK_CATEGORY, MenuReader

__all__ = [
    "CredentialGateway",
    "Identity",
    "parse_bearer_token",
    "LoginFlow",
    "RegistrationFlow",
    "OrderSubmissionFlow",
    "OrderHistoryReader",
    "MenuReader",
    "FALLBACK_CATEGORY",
]
