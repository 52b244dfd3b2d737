# api/dependencies/db.py
from fastapi import Request
from sqlalchemy.orm import Session


def get_db(request: Request):
    """Yields a session from the factory the app built at startup."""
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
