import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from core.config import CORS_ORIGINS, LOG_LEVEL, UPLOAD_DIR
from core.database import create_db_and_tables
from routes import auth, complaints, admin

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("Database ready")
    yield

app = FastAPI(title="Complaint Desk", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Make sure the folder exists
os.makedirs(UPLOAD_DIR, exist_ok=True)

# Expose uploads directory at /uploads
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")
app.include_router(auth.router, prefix="/auth")
app.include_router(complaints.router, prefix="/complaints")
app.include_router(admin.router, prefix="/admin")

@app.get("/", tags=["Health"])
def root():
    return {"message": "Complaint Desk API running"}
