# Filename: main.py
# Local entry point: `python main.py` serves rutz.main:app with uvicorn.
# Settings come from the environment / .env (python-decouple).

import uvicorn
from decouple import config

from rutz.main import app

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=config("HOST", default="0.0.0.0"),
        port=config("PORT", default=8000, cast=int),
        log_level=config("LOG_LEVEL", default="info"),
    )
