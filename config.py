"""Central configuration for the Esports Gambling Sponsorship Monitor."""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


# --- Pipeline Config ---
_max_workers = os.getenv("SPONSOR_WATCH_MAX_WORKERS")
MAX_WORKERS = int(_max_workers) if _max_workers else 4

OUTPUT_DIR = os.getenv("SPONSOR_WATCH_OUTPUT_DIR", "output")

# Number of alerts kept in the rendered report (the JSON report keeps all of them)
_report_max_alerts = os.getenv("REPORT_MAX_ALERTS")
REPORT_MAX_ALERTS = int(_report_max_alerts) if _report_max_alerts else 50


# --- Platforms ---
# Fixed order: alert generation walks platforms in this order.
PLATFORMS: tuple[str, ...] = ("youtube", "twitch", "twitter")

# Share of each platform's audience aged 13-25 (used for minor exposure estimate)
PLATFORM_DEMOGRAPHIC_WEIGHTS: dict[str, float] = {
    "youtube": 0.65,
    "twitch": 0.72,
    "twitter": 0.58,
}

HOME_COUNTRY = "BR"


# --- Scoring Rules ---
# Fixed scoring constants (not read from the environment)
HIGH_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 40
MIN_VIDEOS_FOR_FULL_SCORE = 3
LOW_SAMPLE_PENALTY = 0.7
MAX_MENTION_POINTS = 30

RISK_CATEGORIES = frozenset(
    {
        "betting_sites",
        "brazilian_games",
        "skin_gambling",
        "online_casinos",
        "predatory_mechanics",
    }
)

DISCLOSURE_CATEGORY = "sponsorship_indicators"
DEFAULT_CATEGORY_ID = "uncategorized"

# Alerts per analysed set at which overall compliance reaches zero
COMPLIANCE_ALERT_CEILING = 50

# Audience buckets: (exclusive lower bound on total followers, label)
AUDIENCE_BUCKETS: tuple[tuple[int, str], ...] = (
    (1_000_000, "very high"),
    (500_000, "high"),
    (100_000, "medium"),
)

# Title markers checked when listing compliance issues of a single sponsor mention
AD_DISCLOSURE_TAGS: tuple[str, ...] = ("#publi", "#ad")
RELATIONSHIP_DISCLOSURE_TERMS: tuple[str, ...] = ("patrocínio",)
MINOR_UNSUITABLE_CATEGORIES = frozenset({"betting_sites", "brazilian_games"})

# Alert categories grouped for content analysis counters
GAMBLING_DIRECT_CATEGORIES = frozenset({"betting_sites", "online_casinos", "betting_terms", "crypto_betting"})
SKIN_GAMBLING_CATEGORIES = frozenset({"skin_gambling"})
BRAZILIAN_SPECIFIC_CATEGORIES = frozenset({"brazilian_games"})


# --- Keyword Taxonomy ---
@dataclass(frozen=True)
class KeywordCategory:
    id: str
    display_name: str
    severity: int  # 1=Low, 2=Medium, 3=High
    keywords: tuple[str, ...]
    legal_concern: str
    minor_impact: str
    description: str = ""


DEFAULT_CATEGORY = KeywordCategory(
    id=DEFAULT_CATEGORY_ID,
    display_name="General Sponsorship",
    severity=1,
    keywords=(),
    legal_concern="Low",
    minor_impact="Low",
    description="Sponsorship that does not fit any gambling category",
)

# Declaration order matters: categorize() returns the first category with a
# keyword contained in the input. No keyword may be a substring of a keyword
# declared in a later category.
KEYWORD_CATEGORIES: list[KeywordCategory] = [
    # --- 1. Betting operators (High) ---
    KeywordCategory(
        id="betting_sites",
        display_name="Betting Sites",
        severity=3,
        keywords=(
            "bet365", "betway", "rivalry", "betano", "sportingbet", "1xbet",
            "pinnacle", "betfair", "william hill", "unibet", "bet nacional",
            "pixbet", "stake", "bc.game", "roobet", "betsson", "betwinner",
            "melbet", "22bet", "parimatch", "betmotion", "bodog",
        ),
        legal_concern="High - Law 14.790/23",
        minor_impact="Critical",
        description="Direct sponsorship by betting operators",
    ),
    KeywordCategory(
        id="online_casinos",
        display_name="Online Casinos",
        severity=3,
        keywords=(
            "blaze", "f12bet", "estrela bet", "galera bet", "novibet",
            "apostaganha", "vaidebet", "casino", "cassino", "slots",
            "caça níquel",
        ),
        legal_concern="High - Law 14.790/23",
        minor_impact="Critical",
        description="Online casino brands and casino games",
    ),
    KeywordCategory(
        id="brazilian_games",
        display_name="Brazilian Casino Games",
        severity=3,
        keywords=(
            "jogo do tigrinho", "tigrinho", "fortune tiger", "spaceman",
            "aviator", "crash", "mines", "plinko", "roleta", "blackjack",
            "baccarat", "dragon tiger", "crazy time", "lightning roulette",
            "mega wheel", "fortune ox", "fortune rabbit", "fortune mouse",
        ),
        legal_concern="High - Specific appeal to minors",
        minor_impact="Extreme",
        description="Games popular with young Brazilian audiences",
    ),
    KeywordCategory(
        id="skin_gambling",
        display_name="Skin Gambling",
        severity=3,
        keywords=(
            # Skin gambling sites
            "csgolive", "skinclub", "hellcase", "gamdom", "csgoroll",
            "csgo500", "daddyskins", "skinbaron", "bitskins", "waxpeer",
            "tradeit", "skinport", "swap.gg", "rollbit", "duelbits",
            "skins", "skin bet", "skin betting",
            # Loot boxes
            "loot box", "loot boxes", "lootbox", "lootboxes",
            "mystery box", "mystery boxes", "surprise box", "treasure chest",
            "caixa misteriosa", "caixas misteriosas", "caixa surpresa",
            "caixas surpresa", "caixa de loot", "pacote misterioso",
            # Case opening
            "case opening", "case open", "opening cases", "open cases",
            "case unboxing", "unboxing cases", "case battle", "case simulator",
            "abrir caixas", "abrindo caixas", "abertura de caixas",
            "abrindo case", "simulador de cases", "battle de cases",
            # Random reward mechanics
            "gacha", "random drop", "drop aleatorio", "spin wheel",
            "roda da fortuna", "wheel of fortune", "scratch card", "raspadinha",
            "night market", "mercado noturno", "steam market", "csgo case",
            "csgo crate", "diamantes ff", "cubo magico", "cubo mágico",
            "sorteio ff",
            # Monetisation pressure
            "pay to win", "p2w", "microtransaction", "microtransações",
            "premium currency", "moeda premium", "moeda virtual",
            "just one more", "mais uma caixa", "lucky drop", "rare drop",
            "drop raro",
            # Skin raffles
            "sorteio de skin", "rifa de skin", "rifa cs", "sorteio cs",
            "sorteio ao vivo", "giveaway skin",
        ),
        legal_concern="High - Legal grey zone",
        minor_impact="Critical",
        description="Betting with game skins, loot boxes and case opening",
    ),
    KeywordCategory(
        id="crypto_betting",
        display_name="Crypto Betting",
        severity=3,
        keywords=(
            "bitcoin bet", "crypto bet", "btc bet", "eth bet",
            "cripto aposta", "aposta crypto", "blockchain bet",
        ),
        legal_concern="High - Unlicensed operators",
        minor_impact="High",
        description="Betting with cryptocurrencies",
    ),
    KeywordCategory(
        id="predatory_mechanics",
        display_name="Predatory Mechanics",
        severity=3,
        keywords=(
            # FOMO
            "limited time", "tempo limitado", "oferta limitada",
            "última chance", "last chance", "apenas hoje", "only today",
            "expires soon", "expira em breve",
            # Pressure tactics
            "act now", "aja agora", "não perca", "don't miss",
            "exclusive offer", "oferta exclusiva", "vip offer",
            "special deal", "promoção especial",
            # Psychological triggers
            "you deserve", "você merece", "treat yourself",
            "reward yourself", "se recompense",
            # Near-miss and retry prompts
            "one more try", "mais uma tentativa", "better luck",
            "melhor sorte", "try again", "tente novamente",
            "almost won", "quase ganhou",
        ),
        legal_concern="High - Abusive practices",
        minor_impact="High",
        description="Psychological pressure tactics",
    ),
    # --- 2. Generic betting vocabulary and incentives (Medium) ---
    KeywordCategory(
        id="betting_terms",
        display_name="Betting Terms",
        severity=2,
        keywords=(
            "aposta", "apostas", "apostar", "betting", "casa de aposta",
            "site de aposta", "plataforma de aposta", "odds", "palpite",
            "palpites", "prognóstico", "cash out", "all in", "bankroll",
        ),
        legal_concern="Medium - Indirect gambling promotion",
        minor_impact="High",
        description="Betting vocabulary without a named operator",
    ),
    KeywordCategory(
        id="promo_indicators",
        display_name="Promotional Codes",
        severity=2,
        keywords=(
            "código", "cupom", "desconto", "bônus", "promo", "promocional",
            "oferta", "cashback", "freebet", "rodadas grátis", "giros grátis",
            "!code", "!código", "!cupom", "!promo", "!bonus",
            "use o código", "digite o código", "código promocional",
        ),
        legal_concern="Medium - Lack of transparency",
        minor_impact="Medium",
        description="Direct financial incentives",
    ),
    # --- 3. Disclosure and responsible gambling markers (Low) ---
    KeywordCategory(
        id=DISCLOSURE_CATEGORY,
        display_name="Sponsorship Disclosure",
        severity=1,
        keywords=(
            "#publi", "#publicidade", "#ad", "#sponsored", "#partnership",
            "parceria", "patrocínio", "colaboração", "apoiado por",
            "em parceria", "sponsor", "apoiador", "patrocinador",
        ),
        legal_concern="Low - Disclosed advertising",
        minor_impact="Low",
        description="Explicit advertising disclosure markers",
    ),
    KeywordCategory(
        id="risk_terms",
        display_name="Responsible Gambling Notices",
        severity=1,
        keywords=(
            "maior de idade", "+18", "jogue com responsabilidade", "vício",
            "problema de jogo", "pode causar dependência",
        ),
        legal_concern="Low - Age and addiction notices",
        minor_impact="Medium",
        description="Age restriction and responsible gambling notices",
    ),
]


# --- Synthetic Alert Categories ---
HIGH_RISK_CATEGORY_ID = "high_risk"
HIGH_RISK_CATEGORY_NAME = "Overall High Risk"
TRANSPARENCY_CATEGORY_ID = "lack_disclosure"
TRANSPARENCY_CATEGORY_NAME = "Lack of Transparency"

TRANSPARENCY_LEGAL_IMPLICATIONS: tuple[str, ...] = (
    "Violation of the Consumer Defense Code (CDC)",
    "Misleading advertising",
    "Lack of advertising transparency",
)


def validate_config() -> tuple[bool, list[str]]:
    """Validate taxonomy integrity and pipeline knobs."""
    errors: list[str] = []

    if MAX_WORKERS < 1:
        errors.append("SPONSOR_WATCH_MAX_WORKERS must be >= 1")
    if REPORT_MAX_ALERTS < 0:
        errors.append("REPORT_MAX_ALERTS must be >= 0")

    seen: set[str] = set()
    for category in [*KEYWORD_CATEGORIES, DEFAULT_CATEGORY]:
        if category.id in seen:
            errors.append(f"Duplicate keyword category id: {category.id}")
        seen.add(category.id)
        if category.severity not in (1, 2, 3):
            errors.append(f"Invalid severity {category.severity} for category {category.id}")

    if DISCLOSURE_CATEGORY not in seen:
        errors.append(f"Missing disclosure category: {DISCLOSURE_CATEGORY}")
    for category_id in sorted(RISK_CATEGORIES):
        if category_id not in seen:
            errors.append(f"Unknown risk category: {category_id}")

    for platform in PLATFORMS:
        if platform not in PLATFORM_DEMOGRAPHIC_WEIGHTS:
            errors.append(f"Missing demographic weight for platform: {platform}")

    return not errors, errors
