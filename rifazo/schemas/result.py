"""Schemas for published results, ratings and the activity log."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from rifazo.models.activity_log import ActionType
from rifazo.schemas.raffle import PrizeSchema


class RaffleResultSchema(Schema):
    id = fields.String()
    raffle_id = fields.String()
    raffle_name = fields.String()
    winning_numbers = fields.List(fields.Integer())
    winner_names = fields.List(fields.String(allow_none=True))
    winner_phones = fields.List(fields.String(allow_none=True))
    draw_date = fields.String()
    prizes = fields.List(fields.Nested(PrizeSchema))
    creator_username = fields.String(allow_none=True)
    created_at = fields.String(allow_none=True)


class RatingSchema(Schema):
    id = fields.String()
    raffle_id = fields.String()
    raffle_name = fields.String()
    organizer_username = fields.String()
    rater_username = fields.String()
    rating_stars = fields.Integer()
    comment = fields.String(allow_none=True)
    created_at = fields.String(allow_none=True)


class RatingCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    raffle_id = fields.String(required=True)
    rating_stars = fields.Integer(required=True, validate=validate.Range(min=1, max=5))
    comment = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=500))


class ActivityLogSchema(Schema):
    id = fields.String()
    timestamp = fields.String()
    admin_username = fields.String()
    action_type = fields.String(validate=validate.OneOf([a.value for a in ActionType]))
    target_info = fields.String(allow_none=True)
    details = fields.Raw(allow_none=True)


class ActivityLogQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    limit = fields.Integer(load_default=100, validate=validate.Range(min=1, max=1000))
    admin_username = fields.String(load_default=None)
