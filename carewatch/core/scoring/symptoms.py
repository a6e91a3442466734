"""
Bundled Symptom Catalog

Default symptom checklist shown to carers, grouped the way the visit form
presents it. Point values are agency-agreed weights, not clinical scores.

Deployments can replace this table by pointing SYMPTOM_CATALOG_PATH at a
JSON file in the same shape.
"""
from functools import lru_cache

from .catalog import SymptomCatalog

# ── Catalog table ─────────────────────────────────────────────────────────────
# Retiring a symptom: remove it here. Old visit entries that still reference
# the id score it as zero.
SYMPTOM_TABLE = {
    "categories": [
        {
            "id": "mobility",
            "name": "Mobility & Falls",
            "symptoms": [
                {"id": "fall",              "label": "Had a fall",                    "points": 2},
                {"id": "unsteady",          "label": "Unsteady on feet",              "points": 1},
                {"id": "reduced_mobility",  "label": "Less mobile than usual",        "points": 1},
            ],
        },
        {
            "id": "mental_state",
            "name": "Mental State",
            "symptoms": [
                {"id": "confusion",         "label": "New or worsening confusion",    "points": 3},
                {"id": "drowsy",            "label": "Unusually drowsy",              "points": 2},
                {"id": "agitated",          "label": "Agitated or distressed",        "points": 1},
                {"id": "low_mood",          "label": "Low mood or withdrawn",         "points": 1},
            ],
        },
        {
            "id": "breathing",
            "name": "Breathing & Chest",
            "symptoms": [
                {"id": "breathless",        "label": "Short of breath",               "points": 3},
                {"id": "chest_pain",        "label": "Chest pain",                    "points": 3},
                {"id": "new_cough",         "label": "New or worsening cough",        "points": 1},
            ],
        },
        {
            "id": "eating_drinking",
            "name": "Eating & Drinking",
            "symptoms": [
                {"id": "not_eating",        "label": "Not eating",                    "points": 1},
                {"id": "not_drinking",      "label": "Not drinking",                  "points": 2},
                {"id": "vomiting",          "label": "Vomiting",                      "points": 2},
                {"id": "swallowing",        "label": "Difficulty swallowing",         "points": 2},
            ],
        },
        {
            "id": "continence",
            "name": "Toileting",
            "symptoms": [
                {"id": "no_urine",          "label": "Not passed urine today",        "points": 2},
                {"id": "urine_change",      "label": "Change in urine colour or smell", "points": 1},
                {"id": "diarrhoea",         "label": "Diarrhoea",                     "points": 1},
                {"id": "constipation",      "label": "Constipation",                  "points": 0},
            ],
        },
        {
            "id": "skin",
            "name": "Skin",
            "symptoms": [
                {"id": "pressure_area",     "label": "New red or broken pressure area", "points": 2},
                {"id": "skin_tear",         "label": "Wound or skin tear",            "points": 1},
                {"id": "swelling",          "label": "New swelling",                  "points": 1},
                {"id": "rash",              "label": "New rash",                      "points": 1},
            ],
        },
        {
            "id": "pain",
            "name": "Pain",
            "symptoms": [
                {"id": "new_pain",          "label": "New pain",                      "points": 1},
                {"id": "severe_pain",       "label": "Severe or uncontrolled pain",   "points": 2},
            ],
        },
    ]
}


@lru_cache(maxsize=1)
def default_catalog() -> SymptomCatalog:
    """The bundled catalog, built once per process."""
    return SymptomCatalog.from_dict(SYMPTOM_TABLE)
