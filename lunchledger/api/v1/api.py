from fastapi import APIRouter
from lunchledger.api.v1.endpoints import users, orders, payments, settlements, balances, notifications, reminders

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])
