from fastapi import FastAPI

from notekeeper.api import auth, notes
from notekeeper.config import log_file, log_level
from notekeeper.utils.logging_config import setup_logging

setup_logging(log_level(), log_file())

app = FastAPI(title="Notekeeper API")
app.include_router(auth.router)
app.include_router(notes.router)


@app.get("/health")
def health():
    return {"ok": True}
