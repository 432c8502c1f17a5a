from typing import Callable, Union, Type

from pydantic import BaseModel
from fastapi import APIRouter, status, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from computer_reset.moduls.auth.auth_manager import current_user, User
from computer_reset.moduls.response_form import ResponseFrom
from computer_reset.ds.secret import mask_dict
from computer_reset.systems.config import AppConfig
from computer_reset.systems.logging import logger


def create_post(endpoint: str, base_model: Type[BaseModel],
                func: Callable[..., Union[int, str, float, list, tuple, dict, bool, None]], router: APIRouter):
    """
    Функция генерации эндпоинтов типа POST.
    Функция исполняется в пуле потоков, так как запросы к DS блокирующие.
    Если функция вернула None, операция считается неуспешной (ошибки выводятся в логи как предупреждения).

    Args:
        endpoint: Имя эндпоинта. Может быть либо /, либо без указания глубины (дополнительного использования /)
        base_model: BaseModel входных данных
        func: Функция для исполнения
        router: APIRouter
    """

    if '/' == endpoint:
        name_func = 'root'
    elif '/' in endpoint:
        raise ValueError(f"Недопустимое имя эндпоинта: {endpoint}")
    else:
        name_func = endpoint

    endpoint = '/' if endpoint == '/' else f"/{endpoint}"

    route_name = router.prefix.replace('/', '')

    def create_handler():
        """Функция создания функции для эндпоинта"""

        async def path_function_wrapper(request: Request, data: base_model, user: User = Depends(current_user)):
            input_data = data.model_dump()

            # Вывод входных данных в логи, секретные значения маскируются
            logger.info("Input data: %s", mask_dict(input_data, AppConfig.LOGS_MASK_KEYS))

            try:
                logger.info("======Function======")
                result = await run_in_threadpool(func, **input_data)
                logger.info("====================")
            except Exception as e:
                logger.error(f"ERROR: {e}")
                return JSONResponse(
                    ResponseFrom(username=user.username, successfully=False, answer=str(e)).model_dump(mode="json"),
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
                )
            finally:
                input_data = None
                logger.info("DONE")

            response = ResponseFrom(username=user.username, successfully=result is not None, answer=result)
            return JSONResponse(response.model_dump(mode="json"), status_code=status.HTTP_200_OK)

        # Изменение имя функции метода по формуле, для избегания повторений в именах функций
        path_function_wrapper.__name__ = f"{route_name}_{name_func}_post"
        return path_function_wrapper

    handler = create_handler()
    router.add_api_route(endpoint, handler, methods=["POST"])
