from fastapi import HTTPException, status, Request
from pydantic import BaseModel

from computer_reset.systems.logging import logger


class User(BaseModel):
    username: str


def current_user(request: Request) -> User:
    """
    Механизм авторизации пользователя. Сертификат клиента проверяется на обратном прокси,
    который передаёт его subject и serial в headers
    """
    subject = request.headers.get('x-client-subject')
    serial = request.headers.get('x-client-serial')

    logger.info(f"Client ip: {request.headers.get('x-forwarded-for')}, URL: {request.url}, "
                f"Client cert Subject: {subject}, Client cert Serial: {serial}")

    # Если не были полученные subject и serial сертификата, обработка запроса прерывается
    if not all([subject, serial]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Error client certificate")

    return User(username=subject)
