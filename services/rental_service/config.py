import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./autorent.db")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "8060"))
