from fastapi import Request

from jurnext.config import Settings
from jurnext.services.gateway import CheckoutGateway


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_checkout_gateway(request: Request) -> CheckoutGateway:
    return request.app.state.checkout_gateway
