"""Schemas for raffles and their prizes."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from rifazo.models.raffle import RaffleStatus
from rifazo.reference.lottery_data import DRAW_TIMES, LOTTERY_NAMES
from rifazo.reference.payment_methods import AVAILABLE_PAYMENT_METHODS

CURRENCIES = ["USD", "Bs"]


class PrizeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    description = fields.String(
        required=True, validate=validate.Length(min=3, error="El premio debe tener al menos 3 caracteres.")
    )
    lottery_name = fields.String(allow_none=True, load_default=None, validate=validate.OneOf(LOTTERY_NAMES))
    draw_time = fields.String(allow_none=True, load_default=None, validate=validate.OneOf(DRAW_TIMES))


class AcceptedPaymentMethodSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True, validate=validate.OneOf([m.id for m in AVAILABLE_PAYMENT_METHODS]))
    name = fields.String(dump_only=True)
    category = fields.String(dump_only=True)
    admin_provided_details = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=250))


class RaffleSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String()
    image = fields.String()
    draw_date = fields.String()
    price_per_ticket = fields.Float()
    currency = fields.String()
    total_numbers = fields.Integer()
    prizes = fields.List(fields.Nested(PrizeSchema))
    accepted_payment_methods = fields.List(fields.Nested(AcceptedPaymentMethodSchema))
    creator_username = fields.String(allow_none=True)
    status = fields.String()
    min_tickets_per_purchase = fields.Integer(allow_none=True)
    max_tickets_per_purchase = fields.Integer(allow_none=True)
    winning_numbers = fields.List(fields.Integer(allow_none=True))
    winner_names = fields.List(fields.String(allow_none=True))
    winner_phones = fields.List(fields.String(allow_none=True))
    created_at = fields.String(allow_none=True)

    # Filled in by the view from participations.
    effective_sold_numbers = fields.List(fields.Integer())
    available_count = fields.Integer()


class _RaffleFields(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=5, error="El nombre debe tener al menos 5 caracteres."))
    description = fields.String(
        validate=validate.Length(min=10, error="La descripción debe tener al menos 10 caracteres.")
    )
    image = fields.String(validate=validate.Length(min=1, error="Por favor, sube una imagen para la rifa."))
    draw_date = fields.Date()
    price_per_ticket = fields.Float(validate=validate.Range(min=0))
    currency = fields.String(validate=validate.OneOf(CURRENCIES))
    total_numbers = fields.Integer(validate=validate.Range(min=1))
    prizes = fields.List(
        fields.Nested(PrizeSchema), validate=validate.Length(min=1, error="Debe haber al menos un premio.")
    )
    accepted_payment_methods = fields.List(
        fields.Nested(AcceptedPaymentMethodSchema),
        validate=validate.Length(min=1, error="Debes seleccionar al menos un método de pago."),
    )
    min_tickets_per_purchase = fields.Integer(allow_none=True, validate=validate.Range(min=1))
    max_tickets_per_purchase = fields.Integer(allow_none=True, validate=validate.Range(min=1))

    @validates_schema
    def _validate_purchase_bounds(self, data, **kwargs):  # type: ignore[no-untyped-def]
        mn = data.get("min_tickets_per_purchase")
        mx = data.get("max_tickets_per_purchase")
        if mn is not None and mx is not None and mn > mx:
            raise ValidationError({"min_tickets_per_purchase": ["Must not exceed max_tickets_per_purchase"]})


class RaffleCreateSchema(_RaffleFields):
    name = fields.String(
        required=True, validate=validate.Length(min=5, error="El nombre debe tener al menos 5 caracteres.")
    )
    draw_date = fields.Date(required=True)
    price_per_ticket = fields.Float(required=True, validate=validate.Range(min=0))
    currency = fields.String(load_default="USD", validate=validate.OneOf(CURRENCIES))
    total_numbers = fields.Integer(required=True, validate=validate.Range(min=1))
    prizes = fields.List(
        fields.Nested(PrizeSchema),
        required=True,
        validate=validate.Length(min=1, error="Debe haber al menos un premio."),
    )
    accepted_payment_methods = fields.List(fields.Nested(AcceptedPaymentMethodSchema), load_default=list)


class RaffleUpdateSchema(_RaffleFields):
    status = fields.String(validate=validate.OneOf([s.value for s in RaffleStatus]))


class WinnerEntrySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    winning_number = fields.Integer(required=True, validate=validate.Range(min=1))
    winner_name = fields.String(allow_none=True, load_default=None)
    winner_phone = fields.String(
        allow_none=True, load_default=None, validate=validate.Length(max=25, error="Máximo 25 caracteres.")
    )


class RegisterWinnersSchema(Schema):
    winners = fields.List(fields.Nested(WinnerEntrySchema), required=True, validate=validate.Length(min=1))
