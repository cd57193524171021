from fastapi import APIRouter

from app.domains.commerce.api.routes import cart_router, catalog_router, payment_router

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(catalog_router)
api_router.include_router(cart_router)
api_router.include_router(payment_router)
