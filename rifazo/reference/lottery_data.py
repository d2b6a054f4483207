"""Lotteries a raffle prize can be drawn against, and their draw slots."""

from __future__ import annotations

LOTTERY_NAMES: list[str] = [
    "La Granjita",
    "Lotto Activo",
    "Lotto Rey",
    "Chance Animalitos",
    "Guacharo Activo",
    "Selva Plus",
    "Triple Gana",
    "Triple Zulia",
    "Triple Táchira",
    "Triple Caracas",
    "Chance A",
    "Chance B",
    "Chance C",
    "Multi Triple",
    "Datos Activos",
]

DRAW_TIMES: list[str] = [
    "08:00 AM",
    "09:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "01:00 PM",
    "02:00 PM",
    "03:00 PM",
    "04:00 PM",
    "05:00 PM",
    "06:00 PM",
    "07:00 PM",
    "08:00 PM",
    "09:00 PM",
]


def is_known_lottery(name: str | None) -> bool:
    return name in LOTTERY_NAMES


def is_known_draw_time(value: str | None) -> bool:
    return value in DRAW_TIMES
