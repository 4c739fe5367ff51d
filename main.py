# main.py
"""
Local entrypoint: `python main.py` or `uvicorn main:app`.
"""
import uvicorn

from lottery.config.settings import settings
from lottery.main import app

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8030, log_level=settings.LOG_LEVEL.lower())
