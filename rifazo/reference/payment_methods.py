"""Payment methods an organizer can accept for ticket purchases."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentMethodField:
    id: str
    label: str
    placeholder: str
    type: str = "text"  # text | tel | textarea
    max_length: int | None = None


@dataclass(frozen=True)
class PaymentMethodOption:
    id: str
    name: str
    category: str
    detail_type: str = "none"  # specificFields | generic | none | freeformText
    fields: tuple[PaymentMethodField, ...] = field(default_factory=tuple)
    placeholder: str | None = None


AVAILABLE_PAYMENT_METHODS: list[PaymentMethodOption] = [
    PaymentMethodOption(
        id="pagoMovil",
        name="Pago Móvil",
        category="Nacionales",
        detail_type="specificFields",
        fields=(
            PaymentMethodField(id="ci", label="Cédula del Titular", placeholder="V-12345678"),
            PaymentMethodField(id="phone", label="Celular del Titular", placeholder="04XX-1234567", type="tel"),
            PaymentMethodField(id="bank", label="Banco del Titular", placeholder="Ej: Mercantil"),
        ),
    ),
    PaymentMethodOption(
        id="efectivoUSD",
        name="Efectivo (USD)",
        category="Nacionales",
        detail_type="none",
    ),
    PaymentMethodOption(
        id="zinli",
        name="Zinli",
        category="Internacionales",
        detail_type="generic",
        placeholder="Ingresa tu correo o usuario Zinli",
    ),
    PaymentMethodOption(
        id="otro",
        name="Otro Método (describir abajo)",
        category="Otros",
        detail_type="freeformText",
        placeholder=(
            "Ej: Transferencia al Banco ABC, Cta. Corriente Nro. 123..., a nombre de X, CI: V-123. "
            "O: Contáctame para acordar método de pago."
        ),
    ),
]

PAYMENT_METHOD_CATEGORIES: list[str] = list(dict.fromkeys(pm.category for pm in AVAILABLE_PAYMENT_METHODS))

_BY_ID = {pm.id: pm for pm in AVAILABLE_PAYMENT_METHODS}


def get_payment_method(method_id: str) -> PaymentMethodOption | None:
    return _BY_ID.get(method_id)


def get_payment_methods_by_category() -> dict[str, list[PaymentMethodOption]]:
    return {
        category: [pm for pm in AVAILABLE_PAYMENT_METHODS if pm.category == category]
        for category in PAYMENT_METHOD_CATEGORIES
    }
