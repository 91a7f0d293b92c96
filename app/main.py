# app/main.py
import uvicorn

from app.api import create_app
from app.data.database import Base, engine, init_db
from app.utils.logging import get_logger

logger = get_logger(__name__)

logger.info("Initializing database...")
try:
    init_db()
    logger.info(f"Tables ready: {list(Base.metadata.tables.keys())}")
except Exception:
    logger.exception(f"Failed to create tables on {engine.url.render_as_string(hide_password=True)}")
    raise

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
