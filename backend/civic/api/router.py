from fastapi import APIRouter

from .admin import content as admin_content
from .admin import session as admin_session

router = APIRouter(prefix="/api")

# /session must be registered before the /{kind} routes that would shadow it
_admin_routers = [
    admin_session.router,
    admin_content.router,
]

for _router in _admin_routers:
    router.include_router(_router)
