"""Schemas shared across routers."""

from typing import ClassVar, Self

from pydantic import BaseModel, model_validator


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class PartialUpdate(BaseModel):
    """Body for a partial update: omitted fields are left unchanged.

    Fields named in ``not_nullable`` back NOT NULL columns. Sending an explicit
    ``null`` for one of them is a validation error (422).
    """

    not_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> Self:
        nulls = sorted(
            name for name in self.model_fields_set & self.not_nullable if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"may not be null: {', '.join(nulls)}")
        return self
