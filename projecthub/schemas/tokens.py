# projecthub/schemas/tokens.py
from pydantic import BaseModel
from projecthub.schemas.user import UserOut


class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserOut

    model_config = {
        "from_attributes": True
    }
