import os
from dotenv import load_dotenv


load_dotenv()


SERVICE_NAME = os.getenv("SERVICE_NAME", "cafe_service")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./cafe.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))


TOP_PRODUCTS_WINDOW_DAYS = int(os.getenv("TOP_PRODUCTS_WINDOW_DAYS", 30))
TOP_PRODUCTS_LIMIT = int(os.getenv("TOP_PRODUCTS_LIMIT", 5))
DAILY_REVENUE_WINDOW_DAYS = int(os.getenv("DAILY_REVENUE_WINDOW_DAYS", 7))
RECENT_ORDERS_LIMIT = int(os.getenv("RECENT_ORDERS_LIMIT", 5))
