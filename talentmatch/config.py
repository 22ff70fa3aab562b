import os
from dotenv import load_dotenv

load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "talentmatch_db")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# all-MiniLM-L6-v2 output size
EMBEDDING_DIMENSION = int(os.getenv("EMBEDDING_DIMENSION", "384"))

RECOMMENDATION_LIMIT = int(os.getenv("RECOMMENDATION_LIMIT", "15"))
MAX_RECOMMENDATION_LIMIT = int(os.getenv("MAX_RECOMMENDATION_LIMIT", "50"))
MAX_SHORTLIST = int(os.getenv("MAX_SHORTLIST", "50"))

FETCH_RETRY_ATTEMPTS = int(os.getenv("FETCH_RETRY_ATTEMPTS", "3"))
FETCH_RETRY_BACKOFF = float(os.getenv("FETCH_RETRY_BACKOFF", "0.5"))

SLOW_REQUEST_THRESHOLD = float(os.getenv("SLOW_REQUEST_THRESHOLD", "2.0"))
