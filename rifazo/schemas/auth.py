"""Schemas for registration and login payloads."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

USERNAME_RULES = [
    validate.Length(min=3, error="El nombre de usuario debe tener al menos 3 caracteres."),
    validate.Regexp(r"^[a-zA-Z0-9_]+$", error="Solo letras, números y guion bajo."),
]
PASSWORD_RULES = validate.Length(min=6, error="La contraseña debe tener al menos 6 caracteres.")

# Methods an organizer can declare on the request form; "Otro" takes free text.
ORGANIZER_PAYMENT_OPTIONS = ["Pago Móvil", "Zelle", "Binance (USDT)", "Transferencia Bancaria"]
ORGANIZER_PAYMENT_CHOICES = ORGANIZER_PAYMENT_OPTIONS + ["Otro"]


def _accepted(message: str) -> validate.Equal:
    return validate.Equal(True, error=message)


class CredentialsMixin(Schema):
    username = fields.String(required=True, validate=USERNAME_RULES)
    password = fields.String(required=True, load_only=True, validate=PASSWORD_RULES)
    confirm_password = fields.String(required=True, load_only=True)

    @validates_schema
    def _validate_passwords_match(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if data.get("password") != data.get("confirm_password"):
            raise ValidationError({"confirm_password": ["Las contraseñas no coinciden."]})


class RegisterUserSchema(CredentialsMixin):
    """Validate a participant registration."""

    class Meta:
        unknown = EXCLUDE


class RegisterOrganizerSchema(CredentialsMixin):
    """Validate an organizer registration request."""

    class Meta:
        unknown = EXCLUDE

    organizer_type = fields.String(
        required=True,
        validate=validate.OneOf(["individual", "business"], error="Debes seleccionar un tipo de perfil."),
    )
    full_name = fields.String(load_default=None)
    company_name = fields.String(load_default=None)
    rif = fields.String(load_default=None)
    id_card_number = fields.String(
        required=True, validate=validate.Length(min=5, error="Cédula de identidad es requerida.")
    )
    email = fields.Email(required=True, error_messages={"invalid": "Correo electrónico inválido."})
    whatsapp_number = fields.String(
        required=True, validate=validate.Length(min=10, error="Número de WhatsApp es requerido.")
    )
    location_state = fields.String(required=True, validate=validate.Length(min=3, error="Estado es requerido."))
    location_city = fields.String(required=True, validate=validate.Length(min=3, error="Ciudad es requerida."))
    commercial_name = fields.String(load_default=None)
    payment_methods = fields.List(
        fields.String(validate=validate.OneOf(ORGANIZER_PAYMENT_CHOICES)),
        required=True,
        validate=validate.Length(min=1, error="Selecciona al menos un método de pago."),
    )
    other_payment_method = fields.String(load_default=None)
    public_alias = fields.String(
        required=True,
        validate=validate.Length(min=3, error="El alias público es requerido y debe tener al menos 3 caracteres."),
    )
    bio = fields.String(
        load_default=None, validate=validate.Length(max=200, error="La biografía no puede exceder 200 caracteres.")
    )
    captcha_text = fields.String(load_default=None)

    commitment_agreed = fields.Boolean(required=True, validate=_accepted("Debes aceptar este compromiso."))
    guarantee_agreed = fields.Boolean(required=True, validate=_accepted("Debes aceptar esta garantía."))
    fraud_policy_agreed = fields.Boolean(required=True, validate=_accepted("Debes aceptar esta política."))
    contact_agreed = fields.Boolean(
        required=True, validate=_accepted("Debes autorizar el contacto para continuar.")
    )
    terms_agreed = fields.Boolean(required=True, validate=_accepted("Debes aceptar los términos de RIFAZO."))
    info_is_truthful_agreed = fields.Boolean(
        required=True, validate=_accepted("Debes declarar que la información es verdadera.")
    )

    @validates_schema
    def _validate_profile(self, data, **kwargs):  # type: ignore[no-untyped-def]
        errors: dict[str, list[str]] = {}
        if data.get("organizer_type") == "individual":
            if len((data.get("full_name") or "").strip()) < 5:
                errors["full_name"] = ["Nombre completo es requerido para perfil individual."]
        elif data.get("organizer_type") == "business":
            if len((data.get("company_name") or "").strip()) < 3:
                errors["company_name"] = ["Nombre de la empresa es requerido."]
            if len((data.get("rif") or "").strip()) < 5:
                errors["rif"] = ["RIF es requerido para perfil de negocio."]
        if "Otro" in (data.get("payment_methods") or []) and not (data.get("other_payment_method") or "").strip():
            errors["other_payment_method"] = ["Por favor, especifica el otro método de pago."]
        if errors:
            raise ValidationError(errors)


class LoginSchema(Schema):
    username = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class LoginResultSchema(Schema):
    success = fields.Boolean(required=True)
    reason = fields.String(allow_none=True)
    lockout_minutes = fields.Integer(allow_none=True)
    expires_soon = fields.Boolean()


class OrganizerRegistrationSchema(Schema):
    whatsapp_message = fields.String(required=True)
    whatsapp_url = fields.String(required=True)
