# API Routers
from app.routers import auth

__all__ = ['auth']
