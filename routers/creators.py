from fastapi import APIRouter
from routers.cms import add_collection_routes
from utils.validation import validate_creator

router = APIRouter(prefix="/api/creators", tags=["creators"])

add_collection_routes(router, "creators", "", validate_creator, label="Creator")
