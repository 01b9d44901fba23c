from fastapi import FastAPI
from router import router
from auth import auth_router
from config import HOST, PORT
from database import init_db
from errors import register_exception_handlers
from logger import get_logger
from sessions import SessionStore
from typing import Optional
import uvicorn

logger = get_logger(__name__)


def create_app(sessions: Optional[SessionStore] = None) -> FastAPI:
    app = FastAPI(title="Personal Expense Tracker API")
    # One session registry per application instance
    app.state.sessions = sessions or SessionStore()

    register_exception_handlers(app)
    app.include_router(auth_router, prefix="/api", tags=["authentication"])
    app.include_router(router, prefix="/api", tags=["expenses"])

    @app.get("/")
    def home():
        return {"message": "Welcome to Personal Expense Tracker API"}

    return app


init_db()
app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting server on http://{HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
