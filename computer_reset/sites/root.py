import inspect

from fastapi import status, Depends
from fastapi.routing import APIRoute
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from computer_reset.moduls.auth.auth_manager import current_user, User
from computer_reset.moduls.response_form import ResponseFrom
from computer_reset.main import app


@app.get("/")
async def root_get(user: User = Depends(current_user)) -> JSONResponse:
    """Корневой сайт приложения, возвращающий все опубликованные эндпоинты"""
    routes_info = []
    for route in app.routes:
        if isinstance(route, APIRoute):
            sig = inspect.signature(route.endpoint)
            params = []

            for name, param in sig.parameters.items():
                ann = param.annotation

                # Если это Pydantic-модель
                if param.name == 'data' and isinstance(ann, type) and issubclass(ann, BaseModel):
                    for field_name, field in ann.model_fields.items():
                        params.append({
                            "name": str(field_name),
                            "type": str(field.annotation),
                            "required": field.is_required(),
                        })

            routes_info.append({
                "path": route.path,
                "methods": sorted(route.methods),
                "params": params
            })

    return JSONResponse(
        ResponseFrom(username=user.username, successfully=True, answer=routes_info).model_dump(mode="json"),
        status_code=status.HTTP_200_OK
    )
