"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import (
    auth, transactions, invoices, expenses, documents,
    notifications, accountant
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Client records
router.include_router(transactions.router)
router.include_router(invoices.router)
router.include_router(expenses.router)
router.include_router(documents.router)

# Notifications
router.include_router(notifications.router)

# Accountant queues
router.include_router(accountant.router)
