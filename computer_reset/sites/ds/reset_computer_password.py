from pydantic import BaseModel, SecretStr, model_validator

from computer_reset.moduls.post_base import create_post
from computer_reset.reset import reset_computer_password as reset, Credential
from . import router_ds


class SpecData(BaseModel):
    identity: str
    new_password: SecretStr
    domain: str = None

    # Альтернативная учётная запись (указываются оба значения или ни одного)
    login: str = None
    password: SecretStr = None

    host: str = None
    base: str = None

    @model_validator(mode="after")
    def check_credential(self):
        if (self.login is None) != (self.password is None):
            raise ValueError("login and password must be passed together")
        return self


def reset_computer_password(identity: str, new_password: SecretStr, domain: str = None, login: str = None,
                            password: SecretStr = None, host: str = None, base: str = None):
    credential = Credential(login=login, password=password) if login else None
    return reset(identity=identity, new_password=new_password, domain=domain, credential=credential,
                 host=host, base=base)


create_post("reset_computer_password", SpecData, reset_computer_password, router_ds)
