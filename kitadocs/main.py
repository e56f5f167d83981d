"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .users.router import router as users_router
from .doctors.router import router as doctors_router
from .admins.router import router as admins_router
from .forms.router import router as forms_router
from .articles.router import router as articles_router
from .database import engine, SessionLocal
from .config import settings
from .models import Base  # Import all models here for creating tables
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares
from .core.bootstrap import bootstrap_admin_if_needed

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info("Starting KitaDocs API...")
try:
    bootstrap_admin_if_needed(SessionLocal())
except Exception as e:
    logger.error(f"Bootstrap process failed: {str(e)}")

# Create FastAPI application
app = FastAPI(
    title="KitaDocs API",
    description="API for doctor verification, assessment forms and health articles",
    version="1.0.0"
)

# Register exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(users_router)
app.include_router(doctors_router)
app.include_router(admins_router)
app.include_router(forms_router)
app.include_router(articles_router)


# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint.

    Returns:
        dict: Simple welcome message
    """
    return {"message": "Welcome to KitaDocs API", "version": app.version}


# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": "connected"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("kitadocs.main:app", host="0.0.0.0", port=settings.port)
