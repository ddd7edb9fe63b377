# tools/food_classifier.py
"""
HealthBite AI — Ingredient & Food Classifier Tool
=================================================
Tags free-text ingredient tokens or food descriptions with food categories
using curated keyword tables, and records which concrete item was named.

This is a pure text-processing tool (no AI required).

Matching rules:
  - Case-insensitive substring match, except for the few keywords in
    WHOLE_WORD_KEYWORDS ("egg" must not match "eggplant").
  - A category is present if ANY token contains ANY of its keywords.
  - The specific item for a category is the first keyword hit, scanning
    tokens in input order and keywords in declaration order. Later tokens
    never overwrite it.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set


# =============================================================================
# CATEGORIES
# =============================================================================
class Category(Enum):
    """Food categories used to pick recipe templates and nutrition presets."""
    PROTEIN = "protein"
    VEGETABLE = "vegetable"
    CARB = "carb"
    FRUIT = "fruit"
    DAIRY = "dairy"
    NUT = "nut"


# Declaration order matters: the first keyword hit wins per category.
CATEGORY_KEYWORDS: Dict[Category, List[str]] = {
    Category.PROTEIN: [
        "chicken", "beef", "steak", "pork", "turkey", "lamb", "fish",
        "salmon", "tuna", "shrimp", "tofu", "eggs", "egg", "bacon", "ham",
        "sausage", "meat",
    ],
    Category.VEGETABLE: [
        "spinach", "broccoli", "carrot", "tomato", "lettuce", "onion",
        "pepper", "cucumber", "zucchini", "eggplant", "celery",
        "sweet potato", "potato", "garlic", "mushroom", "asparagus", "kale",
        "vegetable",
    ],
    Category.CARB: [
        "rice", "pasta", "bread", "potato", "noodle", "flour", "quinoa",
        "oats", "barley", "corn", "tortilla", "couscous", "spaghetti",
    ],
    Category.FRUIT: [
        "apple", "banana", "orange", "strawberry", "blueberry", "raspberry",
        "berry", "mango", "pineapple", "peach", "pear", "grape",
        "watermelon", "melon", "kiwi", "avocado", "lemon", "lime",
    ],
    Category.DAIRY: [
        "milk", "sour cream", "cottage cheese", "cheese", "yogurt", "cream",
        "butter", "dairy",
    ],
    Category.NUT: [
        "almond", "walnut", "cashew", "pecan", "pistachio", "peanut",
        "hazelnut", "nut",
    ],
}

# Named items that drive the specialized recipe templates.
ITEM_KEYWORDS: Dict[str, List[str]] = {
    "egg": ["egg"],
    "chicken": ["chicken"],
    "beef": ["beef", "steak"],
    "fish": ["fish", "salmon", "tuna", "cod", "tilapia", "shrimp", "seafood"],
    "pork": ["pork", "ham", "bacon"],
    "rice": ["rice"],
    "pasta": ["pasta", "noodle", "spaghetti", "macaroni", "penne", "fettuccine"],
    "bread": ["bread", "toast", "bun", "roll", "sandwich"],
    "cheese": ["cheese", "cheddar", "mozzarella", "parmesan", "swiss"],
    "vegetable": [
        "spinach", "broccoli", "carrot", "tomato", "lettuce", "vegetable",
        "onion", "pepper", "cucumber", "zucchini", "potato", "garlic",
    ],
    "fruit": [
        "apple", "banana", "orange", "berry", "fruit", "strawberry",
        "blueberry", "raspberry", "lemon", "lime",
    ],
}

# Keywords that are prefixes of unrelated foods match whole words only
WHOLE_WORD_KEYWORDS: Dict[str, re.Pattern] = {
    "egg": re.compile(r"\beggs?\b"),
    "eggs": re.compile(r"\beggs\b"),
}

# Calorie tiers for food descriptions, scanned low -> medium -> high.
CALORIE_TIER_KEYWORDS: Dict[str, List[str]] = {
    "low": [
        "salad", "vegetable", "fruit", "apple", "orange", "broccoli",
        "spinach", "lettuce", "tomato", "cucumber",
    ],
    "medium": ["yogurt", "milk", "egg", "chicken", "fish", "turkey", "tofu", "lean"],
    "high": [
        "burger", "pizza", "fries", "fried", "cheese", "cream", "cake",
        "chocolate", "ice cream", "dessert", "butter", "oil",
    ],
}


# =============================================================================
# RESULT TYPE
# =============================================================================
@dataclass
class Classification:
    """Outcome of classifying a list of tokens."""
    categories: Set[Category] = field(default_factory=set)
    specific: Dict[Category, str] = field(default_factory=dict)
    items: Set[str] = field(default_factory=set)

    def has(self, category: Category) -> bool:
        return category in self.categories

    def has_item(self, item: str) -> bool:
        return item in self.items

    def specific_or(self, category: Category, default: str) -> str:
        return self.specific.get(category, default)


# =============================================================================
# HELPERS
# =============================================================================
def keyword_in(keyword: str, lowered: str) -> bool:
    """Match one keyword against already lower-cased text."""
    pattern = WHOLE_WORD_KEYWORDS.get(keyword)
    return bool(pattern.search(lowered)) if pattern else keyword in lowered


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """True when the lower-cased text contains any keyword."""
    lowered = (text or "").lower()
    return any(keyword_in(keyword, lowered) for keyword in keywords)


def first_token_with(tokens: Sequence[str], keywords: Iterable[str]) -> Optional[str]:
    """Return the first token (original casing) that contains any keyword."""
    keywords = list(keywords)
    for token in tokens:
        if contains_any(token, keywords):
            return token
    return None


def detect_calorie_tier(description: str) -> Optional[str]:
    """Return "low", "medium" or "high" for the first tier with a hit, else None."""
    for tier, keywords in CALORIE_TIER_KEYWORDS.items():
        if contains_any(description, keywords):
            return tier
    return None


# =============================================================================
# MAIN TOOL: classify
# =============================================================================
def classify(tokens: Sequence[str]) -> Classification:
    """
    Classify ingredient tokens into categories and named items.

    Args:
        tokens: Ingredient strings or food-description fragments, in the
                order the user gave them.

    Returns:
        Classification with the present categories, the first specific
        item per category, and the named items detected.

    Example:
        >>> result = classify(["2 chicken breasts", "broccoli", "beef"])
        >>> result.specific[Category.PROTEIN]
        'chicken'
    """
    result = Classification()

    for token in tokens:
        lowered = (token or "").lower()
        if not lowered.strip():
            continue

        for category, keywords in CATEGORY_KEYWORDS.items():
            for keyword in keywords:
                if keyword_in(keyword, lowered):
                    result.categories.add(category)
                    result.specific.setdefault(category, keyword)
                    break

        for item, keywords in ITEM_KEYWORDS.items():
            if any(keyword_in(keyword, lowered) for keyword in keywords):
                result.items.add(item)

    return result


__all__ = [
    "Category",
    "CATEGORY_KEYWORDS",
    "ITEM_KEYWORDS",
    "CALORIE_TIER_KEYWORDS",
    "Classification",
    "classify",
    "contains_any",
    "keyword_in",
    "first_token_with",
    "detect_calorie_tier",
]
