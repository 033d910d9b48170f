import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from app.core.config import settings
from app.core.database import SessionLocal
from app.api.routes.rooms import router as rooms_router
from app.api.routes.tenants import router as tenants_router
from app.api.routes.deposits import router as deposits_router
from app.api.routes.billing import router as billing_router
from app.api.routes.bills import router as bills_router
from app.api.routes.payments import router as payments_router
from app.api.routes.dashboard import router as dashboard_router
from app.api.routes.tenant_portal import router as tenant_portal_router
from app.api.routes.audit_logs import router as audit_logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# 1) Create the app FIRST
app = FastAPI(title="Room Rental Billing Backend")

# 2) Add CORS Middleware BEFORE routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3) Include routers AFTER app is created
app.include_router(rooms_router)
app.include_router(tenants_router)
app.include_router(deposits_router)
app.include_router(billing_router)
app.include_router(bills_router)
app.include_router(payments_router)
app.include_router(dashboard_router)
app.include_router(tenant_portal_router)
app.include_router(audit_logs_router)


# 4) Health check endpoints
@app.get("/health")
def health():
    return {"ok": True, "service": "billing-backend", "env": settings.ENV}


@app.get("/db-health")
def db_health():
    db = SessionLocal()
    try:
        db.execute(text("select 1"))
        return {"ok": True, "db": "connected"}
    finally:
        db.close()
