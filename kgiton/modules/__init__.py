"""
Resource modules built on top of the request gateway.
"""

from kgiton.modules.auth import AuthModule
from kgiton.modules.license import LicenseModule
from kgiton.modules.payment import PaymentModule
from kgiton.modules.topup import TopupModule
from kgiton.modules.user import UserModule

__all__ = ["AuthModule", "LicenseModule", "PaymentModule", "TopupModule", "UserModule"]
