"""Organizer subscription plans.

A limit of ``None`` means unlimited.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlanDetails:
    name: str
    display_name: str
    duration_days: int
    raffle_limit: int | None
    max_tickets_per_raffle: int | None
    can_edit_raffles: bool
    can_display_ratings_publicly: bool
    includes_multiple_prizes: bool
    includes_custom_image: bool
    includes_advanced_stats: bool
    includes_detailed_analytics: bool
    includes_featured_listing: bool
    includes_backup_restore: bool
    includes_exclusive_support: bool
    feature_list_ids: tuple[str, ...]
    tagline: str

    def allows_raffle_count(self, created: int) -> bool:
        """Whether one more raffle fits after ``created`` this period."""

        return self.raffle_limit is None or created < self.raffle_limit

    def allows_ticket_count(self, total_numbers: int) -> bool:
        return self.max_tickets_per_raffle is None or total_numbers <= self.max_tickets_per_raffle


CANONICAL_FEATURE_LIST: tuple[str, ...] = (
    "raffleLimit",
    "ticketLimit",
    "multiplePrizes",
    "editRaffles",
    "saveToFavorites",
    "customImagePerRaffle",
    "featuredListing",
    "publicRatingsVisible",
    "manualPaymentConfirmation",
    "whatsappIntegration",
    "publicProfile",
    "analyticsAccess",
    "backupRestoreAccess",
    "exclusiveSupport",
)

PLAN_CONFIG: dict[str, PlanDetails] = {
    "free": PlanDetails(
        name="free",
        display_name="Gratis",
        duration_days=7,
        raffle_limit=2,
        max_tickets_per_raffle=50,
        can_edit_raffles=True,
        can_display_ratings_publicly=False,
        includes_multiple_prizes=False,
        includes_custom_image=True,
        includes_advanced_stats=True,
        includes_detailed_analytics=False,
        includes_featured_listing=False,
        includes_backup_restore=False,
        includes_exclusive_support=True,
        feature_list_ids=CANONICAL_FEATURE_LIST,
        tagline="Ideal para probar. Crea hasta 2 rifas, edítalas, gestiona pagos y accede a estadísticas.",
    ),
    "standard": PlanDetails(
        name="standard",
        display_name="Estándar",
        duration_days=7,
        raffle_limit=10,
        max_tickets_per_raffle=100,
        can_edit_raffles=True,
        can_display_ratings_publicly=False,
        includes_multiple_prizes=False,
        includes_custom_image=True,
        includes_advanced_stats=True,
        includes_detailed_analytics=False,
        includes_featured_listing=True,
        includes_backup_restore=False,
        includes_exclusive_support=True,
        feature_list_ids=CANONICAL_FEATURE_LIST,
        tagline="Más control y personalización, con rifas destacadas e imágenes propias.",
    ),
    "pro": PlanDetails(
        name="pro",
        display_name="Pro",
        duration_days=30,
        raffle_limit=None,
        max_tickets_per_raffle=None,
        can_edit_raffles=True,
        can_display_ratings_publicly=True,
        includes_multiple_prizes=True,
        includes_custom_image=True,
        includes_advanced_stats=True,
        includes_detailed_analytics=True,
        includes_featured_listing=True,
        includes_backup_restore=True,
        includes_exclusive_support=True,
        feature_list_ids=CANONICAL_FEATURE_LIST,
        tagline="La solución completa para profesionales: sin límites y con todas las herramientas avanzadas.",
    ),
}

PLAN_NAMES_ORDERED: tuple[str, ...] = ("free", "standard", "pro")

NO_PLAN = PlanDetails(
    name="free",
    display_name="Sin Plan / Vencido",
    duration_days=0,
    raffle_limit=0,
    max_tickets_per_raffle=0,
    can_edit_raffles=False,
    can_display_ratings_publicly=False,
    includes_multiple_prizes=False,
    includes_custom_image=False,
    includes_advanced_stats=False,
    includes_detailed_analytics=False,
    includes_featured_listing=False,
    includes_backup_restore=False,
    includes_exclusive_support=False,
    feature_list_ids=(),
    tagline="Contacta a soporte para activar o renovar un plan.",
)


def get_plan_details(plan_name: str | None) -> PlanDetails:
    """Plan for a name; unknown or missing names get the zero-limit placeholder."""

    if plan_name and plan_name in PLAN_CONFIG:
        return PLAN_CONFIG[plan_name]
    return NO_PLAN


_NOT_INCLUDED_TEXT = {
    "customImagePerRaffle": "Imagen Personalizada no disponible",
    "featuredListing": "Rifas no aparecen como destacadas",
    "analyticsAccess": "Analíticas avanzadas no disponibles",
    "backupRestoreAccess": "Respaldo de datos no disponible",
    "publicRatingsVisible": "Calificaciones públicas no visibles",
    "multiplePrizes": "Solo un premio por rifa",
}


def get_feature_status(feature_id: str, plan: PlanDetails) -> dict[str, object]:
    """Display row for one feature of a plan: ``{id, included, text}``."""

    texts = {
        "raffleLimit": (
            "Rifas activas ilimitadas"
            if plan.raffle_limit is None
            else f"Crear hasta {plan.raffle_limit} rifas activas"
        ),
        "ticketLimit": (
            "Boletos ilimitados por rifa"
            if plan.max_tickets_per_raffle is None
            else f"Hasta {plan.max_tickets_per_raffle} boletos por rifa"
        ),
        "multiplePrizes": "Rifas con Múltiples Premios",
        "editRaffles": "Edición de rifas creadas",
        "saveToFavorites": "Guarda rifas en favoritos",
        "customImagePerRaffle": "Imagen personalizada en cada rifa",
        "featuredListing": "Posicionamiento preferencial de rifas",
        "publicRatingsVisible": "Calificaciones públicas visibles en perfil",
        "manualPaymentConfirmation": "Gestionar pagos (confirmar/rechazar)",
        "whatsappIntegration": "Contactar participantes por WhatsApp",
        "publicProfile": "Perfil público de organizador visible",
        "analyticsAccess": "Acceso al panel de analíticas detallado",
        "backupRestoreAccess": "Respaldo y Restauración de datos",
        "exclusiveSupport": "Soporte 24/7",
    }

    inclusion = {
        "raffleLimit": plan.raffle_limit is None or plan.raffle_limit > 0,
        "ticketLimit": plan.max_tickets_per_raffle is None or plan.max_tickets_per_raffle > 0,
        "multiplePrizes": plan.includes_multiple_prizes,
        "editRaffles": plan.can_edit_raffles,
        "saveToFavorites": True,
        "customImagePerRaffle": plan.includes_custom_image,
        "featuredListing": plan.includes_featured_listing,
        "publicRatingsVisible": plan.can_display_ratings_publicly,
        "manualPaymentConfirmation": True,
        "whatsappIntegration": True,
        "publicProfile": True,
        "analyticsAccess": plan.includes_detailed_analytics,
        "backupRestoreAccess": plan.includes_backup_restore,
        "exclusiveSupport": plan.includes_exclusive_support,
    }

    included = inclusion.get(feature_id, False)
    text = texts.get(feature_id, f"Característica '{feature_id}' no definida")
    if not included:
        text = _NOT_INCLUDED_TEXT.get(feature_id, text)

    return {"id": feature_id, "included": included, "text": text}
