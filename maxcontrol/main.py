from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
import logging

# Import database components
from maxcontrol.database.database import engine, SessionLocal, Base

# Import middleware
from maxcontrol.common.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

# Import routers
from maxcontrol.modules.auth.router import auth_router, users_router
from maxcontrol.modules.company.router import company_router
from maxcontrol.modules.categories.router import categories_router
from maxcontrol.modules.products.router import product_router
from maxcontrol.modules.customers.router import router as customers_router
from maxcontrol.modules.suppliers.router import router as suppliers_router
from maxcontrol.modules.quotes.router import router as quotes_router
from maxcontrol.modules.accounts_payable.router import router as accounts_payable_router
from maxcontrol.modules.dashboard.router import router as dashboard_router

# Import models for table creation
import maxcontrol.modules.auth.models
import maxcontrol.modules.company.models
import maxcontrol.modules.categories.models
import maxcontrol.modules.products.models
import maxcontrol.modules.customers.models
import maxcontrol.modules.suppliers.models
import maxcontrol.modules.quotes.models
import maxcontrol.modules.accounts_payable.models

from maxcontrol.modules.auth.service import ensure_initial_admin
from maxcontrol.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="MaxControl API",
    description="Cotizaciones, productos, clientes, proveedores y cuentas por pagar",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Errores de validación del request como 400 con el primer mensaje legible"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Datos inválidos")
    detail = f"{field}: {message}" if field else message

    logger.debug(f"Validation error on {request.method} {request.url.path}: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "errors": jsonable_encoder(
            [{"loc": e.get("loc"), "msg": e.get("msg"), "type": e.get("type")} for e in errors]
        )}
    )


# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(company_router)
app.include_router(categories_router)
app.include_router(product_router)
app.include_router(customers_router)
app.include_router(suppliers_router)
app.include_router(quotes_router)
app.include_router(accounts_payable_router)
app.include_router(dashboard_router)

# Create database tables (only for development - use migrations in production)
if settings.ENVIRONMENT == "development":
    Base.metadata.create_all(bind=engine)

@app.get("/")
async def read_root():
    return {
        "message": "MaxControl API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

@app.on_event("startup")
async def startup_event():
    logger.info("MaxControl API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    db = SessionLocal()
    try:
        ensure_initial_admin(db)
    except Exception as e:
        db.rollback()
        logger.warning(f"Initial admin bootstrap skipped or failed: {e}")
    finally:
        db.close()

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("MaxControl API shutting down...")
