from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv

from coupon_service.config.settings import CouponConfigs
from coupon_service.connections.database import close_db_pool, create_tables
from coupon_service.logging.utils import initialize_logging, get_app_logger
from coupon_service.middlewares.logging_middleware import AuditMiddleware

load_dotenv()

# Initialize Sentry (must be done early, before other imports)
from coupon_service.config.sentry import init_sentry
init_sentry()

# Initialize structured logging
initialize_logging()
logger = get_app_logger('coupons.main')

configs = CouponConfigs()

# Debug mode detection (DEBUG=false means production)
DEBUG = configs.DEBUG

logger.info(f"Running in {'debug' if DEBUG else 'production'} mode")


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Starting Coupon Service")
    if configs.DB_AUTO_CREATE:
        create_tables()
        logger.info("database_tables_created")
    yield
    logger.info("Shutting down Coupon Service")
    close_db_pool()

# Disable docs in production (when DEBUG=false)
docs_url = "/docs" if DEBUG else None
redoc_url = "/redoc" if DEBUG else None

app = FastAPI(
    title="Coupon Service",
    version=configs.APP_VERSION,
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url
)

if configs.ALLOWED_ORIGINS:
   origins = [origin.strip() for origin in configs.ALLOWED_ORIGINS.split(",")]
else:
   origins = ["*"]


# Request/Audit logging middleware (place early)
app.add_middleware(AuditMiddleware)

logger.info(f"Configuring CORS with allowed origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
from coupon_service.middlewares.handlers import register_exception_handlers
register_exception_handlers(app)


# Routes
from coupon_service.routes.coupons import coupons_router
from coupon_service.routes.health import router as health_router

app.include_router(coupons_router)
app.include_router(health_router, tags=["health"])
