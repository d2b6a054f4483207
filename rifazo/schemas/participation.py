"""Schemas for ticket purchases."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates

from rifazo.models.participation import PaymentStatus


class PurchaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    numbers = fields.List(fields.Integer(validate=validate.Range(min=1)), required=True)
    participant_name = fields.String(required=True, validate=validate.Length(min=1))
    participant_last_name = fields.String(required=True, validate=validate.Length(min=1))
    participant_id_card = fields.String(required=True, validate=validate.Length(min=1))
    participant_phone = fields.String(required=True, validate=validate.Length(min=1))
    payment_notes = fields.String(allow_none=True, load_default=None)

    @validates("numbers")
    def _validate_numbers(self, value, **kwargs):  # type: ignore[no-untyped-def]
        if not value:
            raise ValidationError("Selecciona al menos un número.")
        if len(value) != len(set(value)):
            raise ValidationError("Numbers must be unique")


class ParticipationSchema(Schema):
    id = fields.String()
    raffle_id = fields.String()
    raffle_name = fields.String()
    creator_username = fields.String(allow_none=True)
    participant_username = fields.String(allow_none=True)
    numbers = fields.List(fields.Integer())
    payment_status = fields.String(validate=validate.OneOf([s.value for s in PaymentStatus]))
    purchase_date = fields.String(allow_none=True)
    participant_name = fields.String(allow_none=True)
    participant_last_name = fields.String(allow_none=True)
    participant_id_card = fields.String(allow_none=True)
    participant_phone = fields.String(allow_none=True)
    payment_notes = fields.String(allow_none=True)
    user_has_rated_organizer_for_raffle = fields.Boolean()


class PurchaseReceiptSchema(Schema):
    participation = fields.Nested(ParticipationSchema)
    total_amount = fields.Float()
    whatsapp_message = fields.String()
    whatsapp_url = fields.String()
