# household_budget/i18n.py
"""
UI strings for the three supported languages.

translate() never raises: an unknown key (or language) comes back as the key
itself so a missing entry shows up as text instead of an error.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Union

from household_budget.models import Language

CURRENCY_OPTIONS: List[Dict[str, str]] = [
    {"value": "€", "label": "Euro (€)"},
    {"value": "$", "label": "Dollar ($)"},
    {"value": "£", "label": "Pound (£)"},
]

LANGUAGE_OPTIONS: List[Dict[str, str]] = [
    {"value": "fr", "label": "Français"},
    {"value": "en", "label": "English"},
    {"value": "es", "label": "Español"},
]

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "fr": {
        "dashboard": "Tableau de bord",
        "expenses": "Dépenses",
        "budget": "Budget",
        "savings": "Épargne",
        "reports": "Rapports",
        "settings": "Paramètres",
        "income": "Revenus",
        "spent": "Dépensé",
        "remaining": "Restant",
        "buyers": "Acheteurs",
        "add_expense": "Ajouter une dépense",
        "expense_added": "Dépense ajoutée.",
        "expense_updated": "Dépense modifiée.",
        "expense_deleted": "Dépense supprimée.",
        "budget_updated": "Budget mis à jour.",
        "buyer_added": "Acheteur ajouté.",
        "buyer_updated": "Acheteur modifié.",
        "buyer_removed": "Acheteur supprimé.",
        "last_buyer": "Il faut garder au moins un acheteur.",
        "income_updated": "Revenus mis à jour.",
        "category_added": "Catégorie ajoutée.",
        "category_updated": "Catégorie modifiée.",
        "category_removed": "Catégorie supprimée.",
        "category_in_use": "Cette catégorie est utilisée par des dépenses.",
        "goal_added": "Objectif d'épargne créé.",
        "goal_updated": "Montant ajouté à l'objectif.",
        "goal_removed": "Objectif supprimé.",
        "goal_completed": "Objectif atteint !",
        "preferences_saved": "Préférences enregistrées.",
        "operation_failed": "L'opération a échoué. Veuillez réessayer.",
        "signed_in": "Connecté.",
        "signed_out": "Déconnecté.",
        "account_created": "Compte créé.",
        "reset_sent": "Un e-mail de réinitialisation a été envoyé.",
        "safe": "Dans le budget",
        "warning": "Attention",
        "danger": "Budget dépassé",
    },
    "en": {
        "dashboard": "Dashboard",
        "expenses": "Expenses",
        "budget": "Budget",
        "savings": "Savings",
        "reports": "Reports",
        "settings": "Settings",
        "income": "Income",
        "spent": "Spent",
        "remaining": "Remaining",
        "buyers": "Buyers",
        "add_expense": "Add expense",
        "expense_added": "Expense added.",
        "expense_updated": "Expense updated.",
        "expense_deleted": "Expense deleted.",
        "budget_updated": "Budget updated.",
        "buyer_added": "Buyer added.",
        "buyer_updated": "Buyer updated.",
        "buyer_removed": "Buyer removed.",
        "last_buyer": "At least one buyer is required.",
        "income_updated": "Income updated.",
        "category_added": "Category added.",
        "category_updated": "Category updated.",
        "category_removed": "Category removed.",
        "category_in_use": "This category is used by existing expenses.",
        "goal_added": "Savings goal created.",
        "goal_updated": "Amount added to the goal.",
        "goal_removed": "Savings goal removed.",
        "goal_completed": "Goal reached!",
        "preferences_saved": "Preferences saved.",
        "operation_failed": "The operation failed. Please try again.",
        "signed_in": "Signed in.",
        "signed_out": "Signed out.",
        "account_created": "Account created.",
        "reset_sent": "A password reset e-mail has been sent.",
        "safe": "On track",
        "warning": "Careful",
        "danger": "Over budget",
    },
    "es": {
        "dashboard": "Panel",
        "expenses": "Gastos",
        "budget": "Presupuesto",
        "savings": "Ahorros",
        "reports": "Informes",
        "settings": "Ajustes",
        "income": "Ingresos",
        "spent": "Gastado",
        "remaining": "Restante",
        "buyers": "Compradores",
        "add_expense": "Añadir gasto",
        "expense_added": "Gasto añadido.",
        "expense_updated": "Gasto modificado.",
        "expense_deleted": "Gasto eliminado.",
        "budget_updated": "Presupuesto actualizado.",
        "buyer_added": "Comprador añadido.",
        "buyer_updated": "Comprador modificado.",
        "buyer_removed": "Comprador eliminado.",
        "last_buyer": "Debe quedar al menos un comprador.",
        "income_updated": "Ingresos actualizados.",
        "category_added": "Categoría añadida.",
        "category_updated": "Categoría modificada.",
        "category_removed": "Categoría eliminada.",
        "category_in_use": "Esta categoría está usada por gastos existentes.",
        "goal_added": "Objetivo de ahorro creado.",
        "goal_updated": "Importe añadido al objetivo.",
        "goal_removed": "Objetivo eliminado.",
        "goal_completed": "¡Objetivo alcanzado!",
        "preferences_saved": "Preferencias guardadas.",
        "operation_failed": "La operación ha fallado. Inténtelo de nuevo.",
        "signed_in": "Sesión iniciada.",
        "signed_out": "Sesión cerrada.",
        "account_created": "Cuenta creada.",
        "reset_sent": "Se ha enviado un correo de restablecimiento.",
        "safe": "Dentro del presupuesto",
        "warning": "Cuidado",
        "danger": "Presupuesto superado",
    },
}


# Dashboard "quote of the day".
QUOTES: Dict[str, List[str]] = {
    "fr": [
        "Votre budget est votre meilleur ami ☕",
        "Chaque euro économisé est un pas vers vos rêves 🌟",
        "La planification financière, c'est comme un bon café : ça se savoure lentement ☕",
        "Vos objectifs financiers sont à portée de main 💫",
        "Un budget bien géré, c'est la liberté assurée 🕊️",
    ],
    "en": [
        "Your budget is your best friend ☕",
        "Every euro saved is a step towards your dreams 🌟",
        "Financial planning is like good coffee: best enjoyed slowly ☕",
        "Your financial goals are within reach 💫",
        "A well-managed budget is freedom assured 🕊️",
    ],
    "es": [
        "Tu presupuesto es tu mejor amigo ☕",
        "Cada euro ahorrado es un paso hacia tus sueños 🌟",
        "La planificación financiera es como un buen café: se saborea despacio ☕",
        "Tus metas financieras están a tu alcance 💫",
        "Un presupuesto bien gestionado es libertad asegurada 🕊️",
    ],
}


def translate(key: str, language: Union[Language, str] = Language.fr) -> str:
    """Look up ``key`` in the table for ``language``; fall back to the key."""
    code = language.value if isinstance(language, Language) else str(language)
    return TRANSLATIONS.get(code, {}).get(key, key)


def quote_of_the_day(day: date, language: Union[Language, str] = Language.fr) -> str:
    """Same quote all day, a different one the next day."""
    code = language.value if isinstance(language, Language) else str(language)
    quotes = QUOTES.get(code) or QUOTES["fr"]
    return quotes[day.toordinal() % len(quotes)]


__all__ = [
    "CURRENCY_OPTIONS",
    "LANGUAGE_OPTIONS",
    "TRANSLATIONS",
    "QUOTES",
    "translate",
    "quote_of_the_day",
]
