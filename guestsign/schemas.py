# guestsign/schemas.py
from typing import Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .coords import Rect
from .errors import ValidationError


class _Body(BaseModel):
    # NaN et Infinity sont acceptes par le decodeur json, pas par nous
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


class RectIn(_Body):
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)

    def to_rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


class CanvasSize(_Body):
    width: float
    height: float


class CreateSessionBody(_Body):
    document_id: str = Field(alias="documentId", min_length=1)
    page: int = Field(ge=0)
    rect: Optional[RectIn] = None
    # variante: rectangle en pixels canvas + taille du canvas affiche
    canvas_rect: Optional[RectIn] = Field(default=None, alias="canvasRect")
    viewport: Optional[CanvasSize] = None
    guest_name: Optional[str] = Field(default=None, alias="guestName")
    guest_email: Optional[str] = Field(default=None, alias="guestEmail")


class SignBody(_Body):
    image_base64: Optional[str] = Field(default=None, alias="imageBase64")


class TestStampBody(_Body):
    document_id: str = Field(alias="documentId", min_length=1)
    page: int = Field(ge=0)
    rect: RectIn
    image_base64: Optional[str] = Field(default=None, alias="imageBase64")


class SendEmailBody(_Body):
    url: str = Field(min_length=1)
    recipient_email: str = Field(alias="recipientEmail", min_length=3)
    recipient_name: Optional[str] = Field(default=None, alias="recipientName")


def parse_body(model, data):
    if data is None:
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid request: {details}") from e
