"""
Routes package for Credibility API.
"""

from credibility_api.routes.credibility import router as credibility_router

__all__ = ["credibility_router"]
