import os
from typing import Literal, Optional
from .config import load_excel_config, PROJECT_ROOT

# ============================================================================
# REFERENCE DATA (fixed, not read from the parameter workbook)
# ============================================================================

# kg CO2e per km, in declaration order. The order is used to break ties
# when modes are ranked by emission.
EMISSION_FACTORS = {
    "bicycle": 0.0,
    "car": 0.12,
    "bus": 0.089,
    "truck": 0.96,
}

TRANSPORT_MODES = {
    "bicycle": {"label": "Bicicleta", "icon": "🚲", "color": "#10b981"},
    "car":     {"label": "Carro",     "icon": "🚗", "color": "#059669"},
    "bus":     {"label": "Ônibus",    "icon": "🚌", "color": "#3b82f6"},
    "truck":   {"label": "Caminhão",  "icon": "🚚", "color": "#ef4444"},
}

# Mode used as the comparison baseline ("vs carro")
BASELINE_MODE = "car"

# Carbon credits: 1 credit offsets 1 tonne CO2e
KG_PER_CREDIT = 1000
PRICE_MIN_BRL = 50
PRICE_MAX_BRL = 150

# Known routes (origin, destination, km). Distances are undirected and the
# table holds at most one entry per unordered city pair.
ROUTES = [
    ("São Paulo, SP", "Rio de Janeiro, RJ", 430),
    ("São Paulo, SP", "Brasília, DF", 1016),
    ("Rio de Janeiro, RJ", "Brasília, DF", 1148),
    ("São Paulo, SP", "Campinas, SP", 95),
    ("Rio de Janeiro, RJ", "Niterói, RJ", 13),
    ("Belo Horizonte, MG", "Ouro Preto, MG", 100),
    ("Salvador, BA", "Feira de Santana, BA", 110),
    ("Fortaleza, CE", "Sobral, CE", 235),
    ("Porto Alegre, RS", "Curitiba, PR", 710),
    ("Manaus, AM", "Belém, PA", 1120),
    ("Recife, PE", "Natal, RN", 287),
    ("João Pessoa, PB", "Maceió, AL", 310),
    ("Goiânia, GO", "Brasília, DF", 209),
    ("Fortaleza, CE", "Natal, RN", 307),
    ("Salvador, BA", "Brasília, DF", 1410),
    ("Curitiba, PR", "São Paulo, SP", 408),
    ("Belo Horizonte, MG", "São Paulo, SP", 586),
    ("Porto Alegre, RS", "São Paulo, SP", 1130),
    ("Teresina, PI", "São Luís, MA", 332),
    ("Florianópolis, SC", "Curitiba, PR", 300),
    ("Vitória, ES", "Belo Horizonte, MG", 518),
    ("Cuiabá, MT", "Campo Grande, MS", 800),
    ("Macapá, AP", "Belém, PA", 520),
    ("Porto Velho, RO", "Rio Branco, AC", 720),
    ("Boa Vista, RR", "Manaus, AM", 750),
    ("Palmas, TO", "Goiânia, GO", 780),
    ("Recife, PE", "Salvador, BA", 810),
    ("Natal, RN", "João Pessoa, PB", 185),
    ("São Paulo, SP", "Santos, SP", 75),
    ("Campinas, SP", "Ribeirão Preto, SP", 313),
    ("Belo Horizonte, MG", "Uberlândia, MG", 540),
    ("São Luís, MA", "Belém, PA", 635),
    ("Vitória, ES", "Salvador, BA", 930),
    ("Maceió, AL", "Aracaju, SE", 260),
    ("Campina Grande, PB", "João Pessoa, PB", 120),
]

# Rounding precision of engine outputs
EMISSION_DECIMALS = 2
CREDIT_DECIMALS = 4

# ============================================================================
# AMBIENT SETTINGS (parameter workbook, with defaults)
# ============================================================================

_config = load_excel_config()


def _get(key, default):
    return _config.get(key, default)


def project_path(value) -> Optional[str]:
    """Relative paths from the parameter workbook are taken from the project root."""
    if value is None:
        return None
    path = os.path.expanduser(str(value).strip())
    if not os.path.isabs(path):
        path = os.path.join(PROJECT_ROOT, path)
    return os.path.normpath(path)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    return bool(value)


DISPLAY_DECIMALS = int(_get("DISPLAY_DECIMALS", 2))
DISPLAY_CREDIT_DECIMALS = int(_get("DISPLAY_CREDIT_DECIMALS", CREDIT_DECIMALS))
REPORTS_DIR = project_path(_get("REPORTS_DIR", "reports"))
AUDIT_ENABLED = _as_bool(_get("AUDIT_ENABLED", True))
LOG_FILE = project_path(_get("LOG_FILE", None))

# ============================================================================
# TYPES
# ============================================================================

TransportMode = Literal["bicycle", "car", "bus", "truck"]
DistanceSource = Literal["route_table", "manual"]
