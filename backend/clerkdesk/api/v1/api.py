"""
Main API router aggregator
"""
from fastapi import APIRouter

from clerkdesk.api.v1.endpoints import (
    admin,
    auth,
    case_copies,
    case_names,
    cases,
    dashboard,
    health,
    interim_orders,
    judgments,
    releases,
    societies,
    support,
    transactions,
)

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(cases.router, prefix="/cases", tags=["Cases"])
api_router.include_router(societies.router, prefix="/societies", tags=["Societies"])
api_router.include_router(interim_orders.router, prefix="/interim-orders", tags=["Interim Orders"])
api_router.include_router(judgments.router, prefix="/judgments", tags=["Judgments"])
api_router.include_router(case_copies.router, prefix="/case-copies", tags=["Case Copies"])
api_router.include_router(case_names.router, prefix="/case-names", tags=["Case Names"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
api_router.include_router(support.router, prefix="/support", tags=["Support"])
api_router.include_router(releases.router, prefix="/releases", tags=["Releases"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
