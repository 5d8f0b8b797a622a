# accounting/expense_categories.py

"""
EXPENSE CATEGORIES

Fixed category codes offered when recording an expense, grouped for
display. Each category is posted to the account configured for it in
ExpenseCategoryAccount; DEFAULT_CATEGORY_ACCOUNT_CODES is what
`seed_chart` wires up for a new company.
"""

from __future__ import annotations

GROUP_TAXES = "Taxes and social charges"
GROUP_UTILITIES = "Utilities"
GROUP_LOGISTICS = "Logistics"
GROUP_SUPPLIES = "Supplies and upkeep"
GROUP_STAFF = "Staff"
GROUP_DAILY = "Day-to-day"

EXPENSE_CATEGORIES: list[tuple[str, str, str]] = [
    ("impot", "Income tax", GROUP_TAXES),
    ("taxe", "Taxes", GROUP_TAXES),
    ("cnss", "Social security (CNSS)", GROUP_TAXES),
    ("dgi", "Tax office (DGI)", GROUP_TAXES),
    ("patente", "Business licence", GROUP_TAXES),
    ("electricite", "Electricity", GROUP_UTILITIES),
    ("eau", "Water", GROUP_UTILITIES),
    ("internet", "Internet", GROUP_UTILITIES),
    ("telephone", "Telephone", GROUP_UTILITIES),
    ("transport", "Transport", GROUP_LOGISTICS),
    ("carburant", "Fuel", GROUP_LOGISTICS),
    ("manutention", "Handling", GROUP_LOGISTICS),
    ("location_vehicule", "Vehicle rental", GROUP_LOGISTICS),
    ("fournitures_bureau", "Office supplies", GROUP_SUPPLIES),
    ("nettoyage", "Cleaning", GROUP_SUPPLIES),
    ("reparation_materiel", "Equipment repair", GROUP_SUPPLIES),
    ("formation_personnel", "Staff training", GROUP_STAFF),
    ("recrutement", "Recruitment", GROUP_STAFF),
    ("uniforme", "Uniforms", GROUP_STAFF),
    ("primes", "Bonuses", GROUP_STAFF),
    ("salaires", "Salaries", GROUP_STAFF),
    ("divers", "Miscellaneous", GROUP_DAILY),
    ("hospitalite", "Hospitality", GROUP_DAILY),
    ("deplacements", "Travel", GROUP_DAILY),
    ("repas", "Meals", GROUP_DAILY),
    ("imprevus", "Contingencies", GROUP_DAILY),
]

CATEGORY_CHOICES = [(code, label) for code, label, _group in EXPENSE_CATEGORIES]
CATEGORY_CODES = frozenset(code for code, _label, _group in EXPENSE_CATEGORIES)

# Expense accounts created by seed_chart: (code, name)
DEFAULT_EXPENSE_ACCOUNTS: list[tuple[str, str]] = [
    ("605000", "Utilities"),
    ("606000", "Supplies and small equipment"),
    ("615000", "Maintenance and repairs"),
    ("618000", "Travel and transport"),
    ("624000", "Hospitality and meals"),
    ("628000", "Telecommunications"),
    ("631000", "Staff training and recruitment"),
    ("641000", "Taxes and duties"),
    ("645000", "Social charges"),
    ("661000", "Salaries and bonuses"),
    ("658000", "Other operating expenses"),
]

DEFAULT_CATEGORY_ACCOUNT_CODES: dict[str, str] = {
    "impot": "641000",
    "taxe": "641000",
    "dgi": "641000",
    "patente": "641000",
    "cnss": "645000",
    "electricite": "605000",
    "eau": "605000",
    "internet": "628000",
    "telephone": "628000",
    "transport": "618000",
    "carburant": "618000",
    "manutention": "618000",
    "location_vehicule": "618000",
    "deplacements": "618000",
    "fournitures_bureau": "606000",
    "uniforme": "606000",
    "nettoyage": "615000",
    "reparation_materiel": "615000",
    "formation_personnel": "631000",
    "recrutement": "631000",
    "primes": "661000",
    "salaires": "661000",
    "hospitalite": "624000",
    "repas": "624000",
    "divers": "658000",
    "imprevus": "658000",
}


def category_label(code: str) -> str:
    for value, label, _group in EXPENSE_CATEGORIES:
        if value == code:
            return label
    return code
