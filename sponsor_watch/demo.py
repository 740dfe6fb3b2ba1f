"""
Synthetic demo snapshot for `main.py --demo`.

Every record is generated from a seeded random.Random and marked
``"synthetic": True``. None of it describes real athletes.
"""

from __future__ import annotations

import random

from config import HOME_COUNTRY, PLATFORMS

GAMES = ("CS2", "Valorant", "League of Legends", "Free Fire", "Rainbow Six")
TEAMS = ("Demo Esports", "Sample Gaming", "Test Squad", "")
COUNTRIES = (HOME_COUNTRY, HOME_COUNTRY, "US", "PT")

TITLE_TEMPLATES = (
    "Ranked até o amanhecer com {sponsor}",
    "Abrindo caixas no {sponsor}! Use o código DEMO10",
    "Treino de mira e review de partida",
    "#publi {sponsor} apresenta: torneio da comunidade",
    "Jogando {game} com os inscritos",
    "Oferta limitada no {sponsor}, cupom: TESTE5",
    "Highlights da semana",
)

SPONSORS = ("bet365", "blaze", "hellcase", "tigrinho", "stake", "skinclub", "betano")


def _content(rng: random.Random, platform: str, athlete_index: int, game: str) -> list[dict]:
    items = []
    for n in range(rng.randint(1, 6)):
        template = rng.choice(TITLE_TEMPLATES)
        items.append(
            {
                "id": f"demo-{athlete_index}-{platform}-{n}",
                "title": template.format(sponsor=rng.choice(SPONSORS), game=game),
                "description": "Synthetic demo content",
                "published_at": f"2024-0{rng.randint(1, 9)}-1{rng.randint(0, 9)}T20:00:00Z",
            }
        )
    return items


def generate_demo_athletes(seed: int = 42, count: int = 6) -> list[dict]:
    """Reproducible list of synthetic athlete records (raw content shape)."""
    rng = random.Random(seed)
    athletes = []
    for index in range(1, count + 1):
        game = rng.choice(GAMES)
        platforms = [p for p in PLATFORMS if rng.random() < 0.7] or [PLATFORMS[0]]
        athletes.append(
            {
                "name": f"Demo Athlete {index}",
                "nickname": f"demo{index}",
                "game": game,
                "team": rng.choice(TEAMS),
                "playing_country": rng.choice(COUNTRIES),
                "synthetic": True,
                "followers": {p: rng.randint(5_000, 2_000_000) for p in platforms},
                "content": {p: _content(rng, p, index, game) for p in platforms},
            }
        )
    return athletes
