import sys
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from studyflow.database import SessionLocal
from studyflow.logging_setup import setup_logging
from studyflow.main import init_db
from studyflow.seed import seed_database

setup_logging("INFO")
init_db()
db = SessionLocal()
try:
    added = seed_database(db)
finally:
    db.close()
print("classes added:", added)
