"""
StockAdvisor Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from stockadvisor.services.base import BaseService, ServiceError

__all__ = ["BaseService", "ServiceError"]
