"""
Scoring de compatibilidad participante-inmueble.

Suma seis factores independientes (máximo 100):

| Factor        | Puntos |
|---------------|--------|
| Ubicación     | 30     |
| Presupuesto   | 25     |
| Dormitorios   | 10     |
| Baños         | 10     |
| Categoría SDA | 15     |
| Accesibilidad | 10     |

Todas las funciones son puras: mismo input, mismo score y mismas razones.
"""

from sdamatch.config import ACCESSIBILITY_FEATURES, MAX_MATCH_SCORE
from sdamatch.models import MatchReason, Participant, Property, PropertyMatch

LOCATION_POINTS = 30
BEDROOMS_POINTS = 10
BATHROOMS_POINTS = 10
SDA_EXACT_POINTS = 15
SDA_PARTIAL_POINTS = 5
ACCESSIBILITY_POINTS = 10
ACCESSIBILITY_NO_REQUIREMENTS_POINTS = 5

# (fracción del presupuesto, puntos), evaluados en orden
BUDGET_BANDS = [
    (0.8, 25),
    (1.0, 20),
    (1.1, 10),
]


def location_score(participant: Participant, prop: Property) -> int:
    """30 si alguna zona preferida aparece en la dirección. Sin crédito parcial."""
    address = prop.address.lower()
    for location in participant.preferred_locations:
        if location.lower() in address:
            return LOCATION_POINTS
    return 0


def budget_score(participant: Participant, prop: Property) -> int:
    """Puntúa el alquiler semanal contra el presupuesto máximo."""
    budget = participant.max_weekly_budget
    rent = prop.weekly_rent
    if not budget or not rent:
        return 0

    for fraction, points in BUDGET_BANDS:
        if rent <= budget * fraction:
            return points
    return 0


def bedrooms_score(participant: Participant, prop: Property) -> int:
    return BEDROOMS_POINTS if prop.bedrooms >= participant.min_bedrooms else 0


def bathrooms_score(participant: Participant, prop: Property) -> int:
    return BATHROOMS_POINTS if prop.bathrooms >= participant.min_bathrooms else 0


def sda_score(participant: Participant, prop: Property) -> int:
    """
    15 si las categorías coinciden, 5 si ambas están cargadas pero difieren.

    Cualquier par de categorías cargadas se considera algo compatible.
    """
    if not participant.sda_category or not prop.sda_category:
        return 0
    if participant.sda_category.lower() == prop.sda_category.lower():
        return SDA_EXACT_POINTS
    return SDA_PARTIAL_POINTS


def accessibility_score(participant: Participant, prop: Property) -> int:
    """
    Proporción de requerimientos de movilidad cubiertos por las features.

    Sin requerimientos declarados se otorga un puntaje fijo de 5.
    """
    declared = participant.mobility_requirements.declared()
    if not declared:
        return ACCESSIBILITY_NO_REQUIREMENTS_POINTS

    features = set(prop.features)
    matched = sum(1 for flag in declared if ACCESSIBILITY_FEATURES[flag] in features)
    # round() de Python redondea .5 al par; acá queremos half-up
    return int(ACCESSIBILITY_POINTS * matched / len(declared) + 0.5)


def _rent_text(prop: Property) -> str:
    rent = prop.weekly_rent or 0
    return f"Weekly rent ${rent:g}"


def score_pair(participant: Participant, prop: Property) -> PropertyMatch:
    """
    Calcula el score (0-100) y las razones de un par participante-inmueble.

    Args:
        participant: Participante validado
        prop: Inmueble validado

    Returns:
        PropertyMatch con razones ordenadas por puntaje descendente
    """
    factors = [
        (
            "Location match",
            location_score(participant, prop),
            f"Property in {prop.address or 'preferred area'}",
        ),
        (
            "Within budget",
            budget_score(participant, prop),
            _rent_text(prop),
        ),
        (
            "Bedroom requirements met",
            bedrooms_score(participant, prop),
            f"{prop.bedrooms} bedrooms available",
        ),
        (
            "Bathroom requirements met",
            bathrooms_score(participant, prop),
            f"{prop.bathrooms} bathrooms available",
        ),
        (
            "SDA category match",
            sda_score(participant, prop),
            f"{prop.sda_category or 'Standard'} category",
        ),
        (
            "Accessibility features match",
            accessibility_score(participant, prop),
            "Required accessibility features available",
        ),
    ]

    reasons = [
        MatchReason(reason=reason, score=score, details=details)
        for reason, score, details in factors
        if score > 0
    ]
    # sorted() es estable: empates quedan en el orden de los factores
    reasons = sorted(reasons, key=lambda r: r.score, reverse=True)

    total = sum(score for _, score, _ in factors)

    return PropertyMatch(
        property_id=prop.id,
        participant_id=participant.id,
        match_score=min(total, MAX_MATCH_SCORE),
        match_reasons=reasons,
    )
