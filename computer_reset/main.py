import importlib
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from computer_reset.systems.config import AppConfig
from computer_reset.systems.logging import logger, s_id_ctx_var, setup_logging

# Настройка root'ового logging, для перехвата всех данных выводимых в логгер
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"SUCKERS_DS: {AppConfig.SUCKERS_DS}")
    logger.info(f"   DS_HOST: {AppConfig.DS_HOST or '<domain>'}")
    logger.info(f"   DS_PORT: {AppConfig.DS_PORT}")
    logger.info(f"DS_DRY_RUN: {AppConfig.DS_DRY_RUN}")
    logger.info(f"   DS_TLS: {AppConfig.DS_TLS_REQUIRE_CERT}")
    yield


app = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def system_middleware(request: Request, call_next):
    # Сохранение уникального кода сессии в контекст, для добавления в логи
    s_id_ctx_var.set(request.headers.get("x-request-id", "-"))
    response = await call_next(request)
    return response


# Импорт первой страницы приложения
importlib.import_module("computer_reset.sites.root")

# Импорт эндпоинтов связанных с DS, если включено
if AppConfig.SUCKERS_DS:
    from computer_reset.sites.ds import router_ds

    for i in ["reset_computer_password"]:
        importlib.import_module(f"computer_reset.sites.ds.{i}")

    app.include_router(router_ds)


def run():
    uvicorn.run(
        "computer_reset.main:app",
        host="0.0.0.0",
        port=AppConfig.PORT,
        proxy_headers=True,
    )


if __name__ == "__main__":
    run()
