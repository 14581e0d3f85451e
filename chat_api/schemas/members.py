from pydantic import BaseModel


class CredentialsRequest(BaseModel):
    member_id: str
    password: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
