from fastapi import APIRouter

# APIRouter для эндпоинтов, связанных с DS
router_ds = APIRouter(prefix="/ds")
