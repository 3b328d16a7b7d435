"""Agregador de routers de la API."""
from fastapi import APIRouter
from helpdesk.api.routers import health, images, profile, queries

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(queries.router)
api_router.include_router(images.router)
api_router.include_router(profile.router)
