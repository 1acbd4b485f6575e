import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memorycraver.config import settings
from memorycraver.database import create_db_and_tables
from memorycraver.errors import register_exception_handlers
from memorycraver.routes import (
    admin,
    auth,
    health,
    notifications,
    payments,
    users,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="MemoryCraver API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(health.router, prefix="/health", tags=["Health"])

@app.get("/")
def root():
    return {
        "auth_endpoints": [
            "/auth/complete-sign-up", "/auth/login", "/auth/security-question",
            "/auth/verify-security-answer", "/auth/reset-password"
        ],
        "user_endpoints": [
            "/users/me", "/users/me/notifications"
        ],
        "payment_endpoints": [
            "/payments/create-order", "/payments/create-bulk-order",
            "/payments/verify-payment", "/payments/verify-bulk-payment",
            "/payments/chapters/{chapter_id}/status", "/payments/my-chapters"
        ],
        "notification_endpoints": [
            "/notifications/chapter-published"
        ],
        "admin_endpoints": [
            "/admin/reset-password"
        ]
    }
