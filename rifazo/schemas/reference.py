"""Schemas for static reference data, plans and backups."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from rifazo.services.backup_service import BACKUP_COLLECTIONS


class PaymentMethodFieldSchema(Schema):
    id = fields.String()
    label = fields.String()
    placeholder = fields.String()
    type = fields.String()
    max_length = fields.Integer(allow_none=True)


class PaymentMethodOptionSchema(Schema):
    id = fields.String()
    name = fields.String()
    category = fields.String()
    detail_type = fields.String()
    placeholder = fields.String(allow_none=True)
    detail_fields = fields.List(fields.Nested(PaymentMethodFieldSchema), attribute="fields", data_key="fields")


class PlanSchema(Schema):
    name = fields.String()
    display_name = fields.String()
    duration_days = fields.Integer()
    raffle_limit = fields.Integer(allow_none=True)
    max_tickets_per_raffle = fields.Integer(allow_none=True)
    can_edit_raffles = fields.Boolean()
    can_display_ratings_publicly = fields.Boolean()
    includes_multiple_prizes = fields.Boolean()
    includes_custom_image = fields.Boolean()
    includes_advanced_stats = fields.Boolean()
    includes_detailed_analytics = fields.Boolean()
    includes_featured_listing = fields.Boolean()
    includes_backup_restore = fields.Boolean()
    includes_exclusive_support = fields.Boolean()
    tagline = fields.String()
    features = fields.List(fields.Dict())


class BackupExportQuerySchema(Schema):
    collections = fields.List(
        fields.String(validate=validate.OneOf(BACKUP_COLLECTIONS)),
        load_default=lambda: list(BACKUP_COLLECTIONS),
    )


class BackupRestoreSchema(Schema):
    data = fields.Dict(keys=fields.String(), values=fields.List(fields.Dict()), required=True)
    collections = fields.List(
        fields.String(validate=validate.OneOf(BACKUP_COLLECTIONS)),
        required=True,
        validate=validate.Length(min=1),
    )


class RestoreReportSchema(Schema):
    success = fields.Boolean()
    errors = fields.List(fields.String())
    summary = fields.List(fields.String())
