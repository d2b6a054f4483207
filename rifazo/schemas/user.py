"""Schemas for users, plan management and favorites."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from rifazo.models.user import Role
from rifazo.reference.plans import PLAN_NAMES_ORDERED
from rifazo.schemas.auth import PASSWORD_RULES, USERNAME_RULES

ROLES = [r.value for r in Role]


class PublicProfileSchema(Schema):
    """What anyone may see about an organizer."""

    username = fields.String()
    role = fields.String()
    public_alias = fields.String(allow_none=True)
    display_name = fields.String()
    organizer_type = fields.String(allow_none=True)
    commercial_name = fields.String(allow_none=True)
    location_state = fields.String(allow_none=True)
    location_city = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    whatsapp_number = fields.String(allow_none=True)
    admin_payment_methods_info = fields.String(allow_none=True)
    average_rating = fields.Float()
    rating_count = fields.Integer()


class UserSchema(PublicProfileSchema):
    """Full account view for the owner and the founder. Never includes secrets."""

    id = fields.String()
    is_blocked = fields.Boolean()
    failed_login_attempts = fields.Integer()
    lockout_until = fields.String(allow_none=True)
    full_name = fields.String(allow_none=True)
    company_name = fields.String(allow_none=True)
    rif = fields.String(allow_none=True)
    id_card_number = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    offered_payment_methods = fields.List(fields.String())
    agreements = fields.Dict(keys=fields.String(), values=fields.Boolean())
    plan = fields.String(allow_none=True)
    plan_active = fields.Boolean()
    plan_start_date = fields.String(allow_none=True)
    plan_end_date = fields.String(allow_none=True)
    plan_assigned_by = fields.String(allow_none=True)
    raffles_created_this_period = fields.Integer()
    raffles_edited_this_period = fields.Integer()
    favorite_raffle_ids = fields.List(fields.String())
    created_at = fields.String(allow_none=True)


class _ProfileFields(Schema):
    class Meta:
        unknown = EXCLUDE

    role = fields.String(validate=validate.OneOf(ROLES))
    is_blocked = fields.Boolean()
    organizer_type = fields.String(allow_none=True, validate=validate.OneOf(["individual", "business"]))
    full_name = fields.String(allow_none=True)
    company_name = fields.String(allow_none=True)
    rif = fields.String(allow_none=True)
    id_card_number = fields.String(allow_none=True)
    commercial_name = fields.String(allow_none=True)
    public_alias = fields.String(allow_none=True)
    whatsapp_number = fields.String(allow_none=True)
    location_state = fields.String(allow_none=True)
    location_city = fields.String(allow_none=True)
    email = fields.Email(allow_none=True)
    bio = fields.String(allow_none=True, validate=validate.Length(max=200))
    admin_payment_methods_info = fields.String(allow_none=True)


class UserCreateSchema(_ProfileFields):
    username = fields.String(required=True, validate=USERNAME_RULES)
    password = fields.String(required=True, load_only=True, validate=PASSWORD_RULES)


class UserUpdateSchema(_ProfileFields):
    username = fields.String(validate=USERNAME_RULES)
    password = fields.String(load_only=True, validate=PASSWORD_RULES)


class BlockSchema(Schema):
    blocked = fields.Boolean(required=True)


class PlanAssignSchema(Schema):
    plan = fields.String(required=True, validate=validate.OneOf(list(PLAN_NAMES_ORDERED)))
    start_date = fields.Date(load_default=None)
