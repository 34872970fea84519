from fastapi import APIRouter

from api.routers import dining_tables, staff, websocket

routes = APIRouter()

# Include all routers
routes.include_router(dining_tables.router)
routes.include_router(staff.router)

# WebSocket routes
routes.include_router(websocket.router)
