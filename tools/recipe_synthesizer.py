# tools/recipe_synthesizer.py
"""
HealthBite AI — Recipe Synthesizer (Offline Fallback)
=====================================================
Builds recipes from the user's ingredients without any AI call.

Two stages:

  1. Specialized templates, picked from an ordered table by the ingredient
     categories and named items present (bread + cheese -> grilled cheese,
     egg + bread -> egg sandwich, ...). Fully deterministic.
  2. Generic recipes, composed from a cooking-method adjective and a dish
     noun drawn with an injectable random.Random, for whatever the
     templates did not cover.

Every recipe lists every ingredient the user supplied, and the result is
always exactly two recipes.
"""

import random
import re
from typing import Callable, List, Optional, Sequence, Tuple

from tools.food_classifier import (
    CATEGORY_KEYWORDS,
    ITEM_KEYWORDS,
    Category,
    Classification,
    classify,
    first_token_with,
    keyword_in,
)
from tools.nutrition_synthesizer import round_half_up
from tools.schemas import Recipe, RecipeNutrition


RECIPES_PER_RESULT = 2
ALTERNATIVE_PREFIX = "Alternative "

# Which generic dish types a meal type asks for: (primary, secondary)
DISH_TYPES_BY_MEAL = {
    "breakfast": ("breakfast", "side"),
    "lunch": ("main", "side"),
    "dinner": ("main", "side"),
    "snack": ("side", "dessert"),
}

# Proteins that roast well; everything else gets a stir-fry
ROAST_PROTEINS = ["chicken", "turkey", "lamb", "pork", "salmon", "fish", "sausage"]


# =============================================================================
# INGREDIENT QUANTITIES
# =============================================================================
_HAS_QUANTITY = re.compile(r"^\d+(?:[./]\d+)?\s+")


def _plural(word: str, suffix: str = "s") -> str:
    return word if word.lower().endswith("s") else f"{word}{suffix}"


# (keywords, formatter); first match wins
QUANTITY_RULES: List[Tuple[List[str], Callable[[str], str]]] = [
    (["egg"], lambda i: f"2 {_plural(i)}"),
    (["chicken", "beef", "fish", "pork", "salmon", "turkey", "steak"], lambda i: f"8 oz {i}"),
    (["rice", "pasta", "flour", "quinoa", "oats"], lambda i: f"1 cup {i}"),
    (["cheese"], lambda i: f"1/2 cup {i}, shredded or cubed"),
    (["bread"], lambda i: f"2 slices {i}"),
    (["milk", "cream", "broth", "stock"], lambda i: f"1 cup {i}"),
    (["butter", "oil"], lambda i: f"2 tbsp {i}"),
    (["salt", "pepper", "spice"], lambda i: f"1 tsp {i}"),
    (["garlic"], lambda i: f"2 cloves {i}, minced"),
    (["onion"], lambda i: f"1 {i}, diced"),
    (["tomato"], lambda i: f"2 {_plural(i, 'es')}, diced"),
    (["potato"], lambda i: f"2 {_plural(i, 'es')}, cubed"),
    (["carrot"], lambda i: f"2 {_plural(i)}, sliced"),
]

DEFAULT_QUANTITY = "1/2 cup"


def format_ingredient(ingredient: str) -> str:
    """
    Prefix an ingredient with a sensible quantity unless it already has one.

    Example:
        >>> format_ingredient("chicken breast")
        '8 oz chicken breast'
        >>> format_ingredient("3 eggs")
        '3 eggs'
    """
    ingredient = ingredient.strip()
    if _HAS_QUANTITY.match(ingredient):
        return ingredient

    lowered = ingredient.lower()
    for keywords, formatter in QUANTITY_RULES:
        if any(keyword_in(keyword, lowered) for keyword in keywords):
            return formatter(ingredient)
    return f"{DEFAULT_QUANTITY} {ingredient}"


def _measure(amount: str, ingredient: str) -> str:
    """Put an explicit amount in front of a user ingredient that has none."""
    return ingredient if _HAS_QUANTITY.match(ingredient) else f"{amount} {ingredient}"


_MINOR_WORDS = {"and", "or", "of", "with", "in"}


def _title_case(text: str) -> str:
    """Capitalize each word, leaving minor words after the first in lower case."""
    words = text.split(" ")
    return " ".join(
        word if i and word in _MINOR_WORDS else word[:1].upper() + word[1:]
        for i, word in enumerate(words)
    )


# =============================================================================
# GENERIC RECIPE NUTRITION
# =============================================================================
DISH_BASE_NUTRITION = {
    "main": {"calories": 350, "protein": 25, "fat": 15, "carbs": 30},
    "side": {"calories": 150, "protein": 5, "fat": 8, "carbs": 20},
    "dessert": {"calories": 300, "protein": 5, "fat": 15, "carbs": 40},
    "breakfast": {"calories": 400, "protein": 15, "fat": 20, "carbs": 35},
}

# (keywords, (calories, protein, fat, carbs)); first match per ingredient
INGREDIENT_DELTAS = [
    (["egg"], (70, 6, 5, 0)),
    (["chicken", "turkey"], (120, 25, 3, 0)),
    (["beef", "steak"], (150, 20, 8, 0)),
    (["fish", "salmon"], (130, 22, 5, 0)),
    (["pork", "ham"], (140, 18, 7, 0)),
    (["rice"], (130, 3, 0, 28)),
    (["pasta"], (150, 5, 1, 30)),
    (["bread"], (80, 3, 1, 15)),
    (["cheese"], (100, 7, 8, 1)),
    (["milk"], (50, 3, 2, 5)),
    (["butter"], (100, 0, 11, 0)),
    (["oil"], (120, 0, 14, 0)),
    (["sugar", "honey"], (50, 0, 0, 13)),
    (["potato"], (130, 3, 0, 30)),
]

# Vegetables, herbs and anything unrecognised
DEFAULT_DELTA = (25, 1, 0, 5)


def estimate_recipe_nutrition(ingredients: Sequence[str], dish_type: str) -> RecipeNutrition:
    """
    Estimate per-serving macros: dish-type base plus a delta per ingredient.

    Calories are rounded to the nearest 10, the other fields to whole grams.
    """
    totals = dict(DISH_BASE_NUTRITION.get(dish_type, DISH_BASE_NUTRITION["main"]))

    for ingredient in ingredients:
        lowered = ingredient.lower()
        delta = next(
            (d for keywords, d in INGREDIENT_DELTAS if any(keyword_in(k, lowered) for k in keywords)),
            DEFAULT_DELTA,
        )
        for name, value in zip(("calories", "protein", "fat", "carbs"), delta):
            totals[name] += value

    return RecipeNutrition(
        calories=round_half_up(totals["calories"] / 10.0) * 10,
        protein=round_half_up(totals["protein"]),
        fat=round_half_up(totals["fat"]),
        carbs=round_half_up(totals["carbs"]),
    )


# =============================================================================
# SPECIALIZED TEMPLATES
# =============================================================================
def _others(tokens: Sequence[str], *used: Optional[str]) -> List[str]:
    """Quantified lines for the user ingredients a template has not placed yet."""
    return [format_ingredient(t) for t in tokens if t not in used]


def _placed(*keys: str) -> List[str]:
    """Quantified lines for key ingredients; one token filling two roles is listed once."""
    return [format_ingredient(t) for t in dict.fromkeys(keys)]


def _grilled_cheese(tokens, found, meal_type) -> Recipe:
    bread = first_token_with(tokens, ITEM_KEYWORDS["bread"])
    cheese = first_token_with(tokens, ITEM_KEYWORDS["cheese"])
    extras = [t for t in tokens if t not in (bread, cheese)]
    return Recipe(
        title=f"Gourmet {_title_case(cheese)} Grilled Sandwich",
        ingredients=[
            _measure("2 slices", bread),
            _measure("2 slices", cheese),
            "1 tbsp butter",
            *_others(tokens, bread, cheese),
            "Salt and pepper to taste",
        ],
        steps=[
            "Butter one side of each slice of bread.",
            "Place one slice of bread, butter side down, in a skillet over medium heat.",
            "Layer cheese on top of the bread.",
            f"Add {', '.join(extras)} on top of the cheese." if extras
            else "Add any additional seasonings if desired.",
            "Top with the second slice of bread, butter side up.",
            "Cook for 2-3 minutes until the bottom is golden brown.",
            "Flip and cook for another 2-3 minutes until the cheese is melted.",
            "Remove from heat, cut in half, and serve hot.",
        ],
        nutrition=RecipeNutrition(calories=350, protein=12, fat=22, carbs=28),
        cooking_time="10 minutes",
        servings=1,
    )


def _egg_sandwich(tokens, found, meal_type) -> Recipe:
    bread = first_token_with(tokens, ITEM_KEYWORDS["bread"])
    egg = first_token_with(tokens, ITEM_KEYWORDS["egg"])
    return Recipe(
        title="Classic Egg Breakfast Sandwich",
        ingredients=[
            _measure("2 slices", bread),
            _measure("2", _plural(egg)),
            "1 tbsp butter",
            *_others(tokens, bread, egg),
            "Salt and pepper to taste",
        ],
        steps=[
            "Heat a non-stick pan over medium heat and melt half the butter.",
            "Crack eggs into the pan and cook to your preference (scrambled or fried).",
            "Season eggs with salt and pepper.",
            "Toast the bread slices.",
            "Spread remaining butter on one side of each toast slice.",
            "Place eggs on one slice of toast and add the other ingredients.",
            "Top with the second slice of toast and serve hot.",
        ],
        nutrition=RecipeNutrition(calories=380, protein=18, fat=22, carbs=28),
        cooking_time="10 minutes",
        servings=1,
    )


def _one_pot(tokens, found, meal_type) -> Recipe:
    protein = first_token_with(tokens, CATEGORY_KEYWORDS[Category.PROTEIN])
    carb = first_token_with(tokens, CATEGORY_KEYWORDS[Category.CARB])
    protein_name = found.specific_or(Category.PROTEIN, "protein")
    carb_name = found.specific_or(Category.CARB, "grain")
    return Recipe(
        title=f"One-Pot {_title_case(protein_name)} and {_title_case(carb_name)}",
        ingredients=[
            *_placed(protein, carb),
            "2 cups broth",
            "2 tbsp olive oil",
            "1 onion, diced",
            "2 cloves garlic, minced",
            *_others(tokens, protein, carb),
            "Salt and pepper to taste",
        ],
        steps=[
            "Heat olive oil in a large pot over medium-high heat.",
            f"Add the {protein_name} and cook until browned on all sides, about 5 minutes.",
            "Add onion and garlic, cooking until softened, about 2 minutes.",
            f"Stir in the {carb_name} and any other ingredients you're using.",
            "Pour in the broth and bring to a boil.",
            "Reduce heat to low, cover, and simmer for 15-20 minutes until tender.",
            "Remove from heat and let stand, covered, for 5 minutes.",
            "Season with salt and pepper and serve.",
        ],
        nutrition=RecipeNutrition(calories=450, protein=30, fat=12, carbs=55),
        cooking_time="30 minutes",
        servings=2,
    )


def _cheesy_pasta(tokens, found, meal_type) -> Recipe:
    pasta = first_token_with(tokens, ITEM_KEYWORDS["pasta"])
    cheese = first_token_with(tokens, ITEM_KEYWORDS["cheese"])
    return Recipe(
        title=f"Creamy {_title_case(cheese)} {_title_case(pasta)}",
        ingredients=[
            _measure("8 oz", pasta),
            f"{_measure('1 cup', cheese)}, grated",
            "2 tbsp butter",
            "2 tbsp flour",
            "1 cup milk",
            *_others(tokens, pasta, cheese),
            "Salt and pepper to taste",
        ],
        steps=[
            "Bring a large pot of salted water to a boil.",
            "Cook pasta according to package directions until al dente. Drain and set aside.",
            "In the same pot, melt butter over medium heat.",
            "Add flour and whisk constantly for 1-2 minutes to make a roux.",
            "Gradually whisk in milk and cook until the sauce thickens, about 3-4 minutes.",
            "Reduce heat to low and stir in the cheese until melted and smooth.",
            "Add any additional ingredients you're using.",
            "Return pasta to the pot, toss to coat, season and serve hot.",
        ],
        nutrition=RecipeNutrition(calories=480, protein=18, fat=22, carbs=55),
        cooking_time="20 minutes",
        servings=2,
    )


def _protein_with_vegetable(tokens, found, meal_type) -> Recipe:
    protein = first_token_with(tokens, CATEGORY_KEYWORDS[Category.PROTEIN])
    vegetable = first_token_with(tokens, CATEGORY_KEYWORDS[Category.VEGETABLE])
    protein_name = found.specific_or(Category.PROTEIN, "protein")
    vegetable_name = found.specific_or(Category.VEGETABLE, "vegetables")
    lines = [
        *_placed(protein, vegetable),
        "2 tbsp olive oil",
        "2 cloves garlic, minced",
        *_others(tokens, protein, vegetable),
        "Salt and pepper to taste",
    ]

    if protein_name in ("eggs", "egg"):
        return Recipe(
            title=f"{_title_case(vegetable_name)} and Egg Skillet",
            ingredients=lines,
            steps=[
                "Heat olive oil in a non-stick pan over medium heat.",
                f"Saute the {vegetable_name} and garlic until softened, about 3-4 minutes.",
                "Beat the eggs in a bowl and season with salt and pepper.",
                "Pour eggs over the vegetables and stir gently until just set.",
                "Add any additional ingredients you're using.",
                "Serve immediately.",
            ],
            nutrition=RecipeNutrition(calories=285, protein=18, fat=22, carbs=6),
            cooking_time="15 minutes",
            servings=2 if meal_type != "snack" else 1,
        )

    if protein_name in ROAST_PROTEINS:
        return Recipe(
            title=f"Roasted {_title_case(protein_name)} with {_title_case(vegetable_name)}",
            ingredients=lines,
            steps=[
                "Preheat oven to 400°F (200°C).",
                f"Toss the {vegetable_name} with half the olive oil, salt and pepper.",
                f"Rub the {protein_name} with garlic, the remaining oil, salt and pepper.",
                "Arrange everything on a sheet pan with any other ingredients you're using.",
                f"Roast for 20-25 minutes until the {protein_name} is cooked through.",
                "Rest for 5 minutes before serving.",
            ],
            nutrition=RecipeNutrition(calories=420, protein=35, fat=18, carbs=15),
            cooking_time="35 minutes",
            servings=2,
        )

    return Recipe(
        title=f"{_title_case(protein_name)} and {_title_case(vegetable_name)} Stir-Fry",
        ingredients=lines,
        steps=[
            f"Slice the {protein_name} and {vegetable_name} into bite-sized pieces.",
            "Heat olive oil in a wok or large skillet over high heat.",
            f"Stir-fry the {protein_name} for 3-4 minutes until browned, then set aside.",
            f"Stir-fry the {vegetable_name} and garlic for 2-3 minutes.",
            "Return the protein to the pan with any other ingredients you're using.",
            "Season with salt and pepper and serve hot.",
        ],
        nutrition=RecipeNutrition(calories=380, protein=30, fat=16, carbs=18),
        cooking_time="20 minutes",
        servings=2,
    )


def _parfait(tokens, found, meal_type) -> Recipe:
    fruit = first_token_with(tokens, CATEGORY_KEYWORDS[Category.FRUIT])
    dairy = first_token_with(tokens, CATEGORY_KEYWORDS[Category.DAIRY])
    fruit_name = found.specific_or(Category.FRUIT, "fruit")
    return Recipe(
        title=f"{_title_case(fruit_name)} Breakfast Parfait",
        ingredients=[
            *_placed(fruit, dairy),
            "1/4 cup granola",
            "1 tbsp honey",
            *_others(tokens, fruit, dairy),
        ],
        steps=[
            f"Wash and slice the {fruit_name}.",
            "Spoon a layer of the dairy into a glass.",
            "Add a layer of fruit, then a sprinkle of granola.",
            "Repeat the layers with any other ingredients you're using.",
            "Drizzle with honey and serve chilled.",
        ],
        nutrition=RecipeNutrition(calories=250, protein=10, fat=6, carbs=40),
        cooking_time="5 minutes",
        servings=1,
    )


def _fruit_and_nut_salad(tokens, found, meal_type) -> Recipe:
    fruit = first_token_with(tokens, CATEGORY_KEYWORDS[Category.FRUIT])
    nut = first_token_with(tokens, CATEGORY_KEYWORDS[Category.NUT])
    return Recipe(
        title=f"{_title_case(found.specific_or(Category.FRUIT, 'fruit'))} and "
              f"{_title_case(found.specific_or(Category.NUT, 'nut'))} Salad",
        ingredients=[
            *_placed(fruit, nut),
            "1 tbsp fresh lemon juice",
            "1 tbsp honey",
            *_others(tokens, fruit, nut),
        ],
        steps=[
            "Wash and chop the fruit into bite-sized pieces.",
            "Toast the nuts in a dry pan for 2-3 minutes until fragrant.",
            "Whisk lemon juice and honey together.",
            "Toss fruit, nuts and any other ingredients with the dressing.",
            "Serve immediately.",
        ],
        nutrition=RecipeNutrition(calories=260, protein=6, fat=14, carbs=30),
        cooking_time="10 minutes",
        servings=2,
    )


def _single_item(title, staples, steps, nutrition, cooking_time, servings, item=None, amount=None):
    """Factory for templates built around one named item plus the user's extras."""
    def build(tokens, found, meal_type) -> Recipe:
        main = first_token_with(tokens, ITEM_KEYWORDS[item]) if item else None
        lines = [_measure(amount, main)] if main else []
        return Recipe(
            title=title,
            ingredients=[*lines, *staples, *_others(tokens, main), "Salt and pepper to taste"],
            steps=steps,
            nutrition=RecipeNutrition(**nutrition),
            cooking_time=cooking_time,
            servings=servings,
        )
    return build


_EXTRA_STEP = "Add any additional ingredients you're using."

_egg = _single_item(
    "Perfect Fluffy Scrambled Eggs",
    ["2 tbsp milk or cream", "1 tbsp butter"],
    [
        "Crack eggs into a bowl and whisk with milk, salt, and pepper.",
        "Heat a non-stick pan over medium-low heat and add butter.",
        "Pour in the egg mixture and let it cook for about 15 seconds.",
        "Gently push the eggs from the edges toward the center, creating soft folds.",
        _EXTRA_STEP,
        "Remove from heat while still slightly wet and serve immediately.",
    ],
    {"calories": 220, "protein": 14, "fat": 16, "carbs": 2}, "5 minutes", 2,
    item="egg", amount="4",
)

_chicken = _single_item(
    "Herb-Roasted Chicken",
    ["2 tbsp olive oil", "2 cloves garlic, minced", "1 tsp dried rosemary", "1 tsp dried thyme"],
    [
        "Preheat oven to 375°F (190°C).",
        "Pat the chicken dry with paper towels.",
        "Mix olive oil, garlic, rosemary, thyme, salt, and pepper.",
        "Rub the herb mixture all over the chicken.",
        "Place chicken in a baking dish along with any additional ingredients.",
        "Bake for 20-25 minutes until it reaches 165°F (74°C).",
        "Let rest for 5 minutes before slicing and serving.",
    ],
    {"calories": 280, "protein": 35, "fat": 15, "carbs": 2}, "30 minutes", 2,
    item="chicken", amount="2",
)

_beef = _single_item(
    "Pan-Seared Beef Steak",
    ["2 tbsp olive oil", "2 cloves garlic, minced", "2 sprigs fresh rosemary", "2 tbsp butter"],
    [
        "Bring the steaks to room temperature for 30 minutes.",
        "Pat dry and season generously with salt and pepper.",
        "Heat olive oil in a heavy skillet over high heat until almost smoking.",
        "Sear the steaks for 3-4 minutes without moving.",
        "Flip, add butter, garlic, rosemary and any additional ingredients, and baste for 3-4 minutes.",
        "Rest for 5 minutes, slice against the grain and serve.",
    ],
    {"calories": 480, "protein": 40, "fat": 28, "carbs": 8}, "25 minutes", 2,
    item="beef", amount="2",
)

_fish = _single_item(
    "Lemon Herb Baked Fish",
    ["2 tbsp olive oil", "1 lemon, sliced", "2 cloves garlic, minced", "1 tbsp fresh dill, chopped"],
    [
        "Preheat oven to 400°F (200°C).",
        "Pat the fish dry and season with salt and pepper.",
        "Combine olive oil, garlic, and dill and drizzle over the fish.",
        _EXTRA_STEP,
        "Arrange lemon slices on top.",
        "Bake for 12-15 minutes until the fish flakes easily with a fork.",
    ],
    {"calories": 240, "protein": 30, "fat": 12, "carbs": 4}, "20 minutes", 2,
    item="fish", amount="2",
)

_pork = _single_item(
    "Garlic and Herb Pork Chops",
    ["2 tbsp olive oil", "3 cloves garlic, minced", "1 tsp dried thyme", "1 tsp dried rosemary"],
    [
        "Pat the pork dry and season with salt and pepper.",
        "Mix olive oil, garlic, thyme, and rosemary and rub it over the pork.",
        "Heat a large skillet over medium-high heat.",
        "Cook for 4-5 minutes on each side until it reaches 145°F (63°C).",
        "Add any additional ingredients during the last few minutes of cooking.",
        "Rest for 3 minutes before serving.",
    ],
    {"calories": 320, "protein": 28, "fat": 22, "carbs": 4}, "20 minutes", 2,
    item="pork", amount="2",
)

_rice = _single_item(
    "Flavorful Rice Pilaf",
    ["2 cups broth", "2 tbsp butter or olive oil", "1 onion, finely diced", "2 cloves garlic, minced"],
    [
        "Rinse the rice under cold water until the water runs clear.",
        "Heat butter or oil in a saucepan and saute the onion until translucent.",
        "Add garlic and the rice and toast for 1-2 minutes.",
        _EXTRA_STEP,
        "Pour in broth, bring to a boil, then cover and simmer for 15-18 minutes.",
        "Rest for 5 minutes, fluff with a fork and serve.",
    ],
    {"calories": 220, "protein": 5, "fat": 8, "carbs": 35}, "30 minutes", 4,
    item="rice", amount="1 cup",
)

_pasta = _single_item(
    "Simple Garlic Pasta",
    ["3 tbsp olive oil", "4 cloves garlic, minced", "1/4 tsp red pepper flakes",
     "2 tbsp fresh parsley, chopped"],
    [
        "Cook the pasta in salted boiling water until al dente, reserving 1/2 cup of water.",
        "Warm olive oil in a large skillet over medium-low heat.",
        "Add garlic and red pepper flakes and cook until fragrant, 1-2 minutes.",
        _EXTRA_STEP,
        "Toss the drained pasta in the skillet with a splash of the reserved water.",
        "Garnish with parsley and serve immediately.",
    ],
    {"calories": 380, "protein": 10, "fat": 16, "carbs": 48}, "15 minutes", 2,
    item="pasta", amount="8 oz",
)

_sandwich = _single_item(
    "Gourmet Sandwich",
    ["2 tbsp mayonnaise or mustard", "2 leaves lettuce", "1 tomato, sliced"],
    [
        "Lay out the bread slices on a clean work surface.",
        "Spread mayonnaise or mustard on the bread.",
        "Layer lettuce, tomato, and any additional ingredients.",
        "Top with the second slice, cut diagonally and serve.",
    ],
    {"calories": 350, "protein": 12, "fat": 18, "carbs": 35}, "10 minutes", 1,
    item="bread", amount="2 slices",
)

_vegetable = _single_item(
    "Roasted Vegetable Medley",
    ["3 tbsp olive oil", "3 cloves garlic, minced", "1 tsp dried herbs"],
    [
        "Preheat oven to 425°F (220°C).",
        "Cut all vegetables into similar-sized pieces.",
        "Toss with olive oil, garlic, herbs, salt, and pepper.",
        "Spread in a single layer on a baking sheet.",
        "Roast for 20-25 minutes, stirring halfway, until caramelized at the edges.",
        "Serve hot as a side or over grains.",
    ],
    {"calories": 180, "protein": 4, "fat": 14, "carbs": 12}, "30 minutes", 4,
)

_fruit = _single_item(
    "Fresh Fruit Salad",
    ["2 tbsp honey or maple syrup", "1 tbsp fresh lemon juice", "1/4 tsp cinnamon (optional)"],
    [
        "Wash and chop the fruit into bite-sized pieces.",
        "Whisk honey, lemon juice, and cinnamon together.",
        "Pour the dressing over the fruit and toss gently.",
        "Refrigerate for 30 minutes before serving.",
    ],
    {"calories": 120, "protein": 1, "fat": 0, "carbs": 30}, "15 minutes", 4,
)


def _has(*items: str) -> Callable[[Classification], bool]:
    return lambda found: all(found.has_item(i) for i in items)


def _in(*categories: Category) -> Callable[[Classification], bool]:
    return lambda found: all(found.has(c) for c in categories)


# Ordered: combination templates first, then single-item templates.
TEMPLATES: List[Tuple[Callable[[Classification], bool], Callable[..., Recipe]]] = [
    (_has("bread", "cheese"), _grilled_cheese),
    (_has("egg", "bread"), _egg_sandwich),
    (_in(Category.PROTEIN, Category.CARB), _one_pot),
    (_has("pasta", "cheese"), _cheesy_pasta),
    (_in(Category.PROTEIN, Category.VEGETABLE), _protein_with_vegetable),
    (_in(Category.FRUIT, Category.DAIRY), _parfait),
    (_in(Category.FRUIT, Category.NUT), _fruit_and_nut_salad),
    (_has("egg"), _egg),
    (_has("chicken"), _chicken),
    (_has("beef"), _beef),
    (_has("fish"), _fish),
    (_has("pork"), _pork),
    (_has("rice"), _rice),
    (_has("pasta"), _pasta),
    (_has("bread"), _sandwich),
    (_has("vegetable"), _vegetable),
    (_has("fruit"), _fruit),
]


def match_templates(tokens: Sequence[str], meal_type: str = "lunch") -> List[Recipe]:
    """Deterministic part of the synthesizer: up to two template recipes."""
    found = classify(tokens)
    recipes: List[Recipe] = []
    for matches, build in TEMPLATES:
        if len(recipes) >= RECIPES_PER_RESULT:
            break
        if matches(found):
            recipes.append(build(tokens, found, meal_type))
    return recipes


# =============================================================================
# GENERIC RECIPES
# =============================================================================
DISH_VOCABULARY = {
    "main": {
        "methods": ["Roasted", "Pan-Seared", "Grilled", "Baked", "Stir-Fried", "Slow-Cooked"],
        "nouns": ["Delight", "Special", "Medley", "Fusion Dish", "Creation"],
        "cooking_time": "30 minutes",
        "servings": 2,
    },
    "side": {
        "methods": ["Fresh", "Simple", "Zesty", "Savory", "Hearty"],
        "nouns": ["Salad", "Side", "Mix", "Medley", "Combo"],
        "cooking_time": "15 minutes",
        "servings": 4,
    },
    "dessert": {
        "methods": ["Sweet", "Decadent", "Creamy", "Delightful"],
        "nouns": ["Treat", "Dessert", "Delight", "Surprise"],
        "cooking_time": "25 minutes",
        "servings": 4,
    },
    "breakfast": {
        "methods": ["Morning", "Sunrise", "Energizing", "Hearty"],
        "nouns": ["Breakfast", "Start", "Meal", "Plate"],
        "cooking_time": "15 minutes",
        "servings": 2,
    },
}


def _steps_for_method(method: str, tokens: Sequence[str]) -> List[str]:
    joined = ", ".join(tokens)
    if method in ("Roasted", "Baked"):
        return [
            "Preheat oven to 375°F (190°C).",
            "Prepare all ingredients: wash, chop, and measure as needed.",
            f"In a bowl, combine {joined} with olive oil, salt, and pepper.",
            "Transfer to a baking dish or sheet pan.",
            "Bake for 20-25 minutes until cooked through and slightly browned.",
            "Rest for 5 minutes, garnish with fresh herbs and serve hot.",
        ]
    if method in ("Pan-Seared", "Stir-Fried"):
        return [
            "Prepare all ingredients: wash, chop, and measure as needed.",
            "Heat oil in a large skillet or wok over medium-high heat.",
            f"Add {tokens[0]} and cook for 2-3 minutes until it starts to brown.",
            "Add the remaining ingredients and stir frequently for 5-7 minutes.",
            "Season with salt and pepper to taste.",
            "Serve hot, garnished with fresh herbs if desired.",
        ]
    if method == "Grilled":
        return [
            "Preheat grill to medium-high heat.",
            f"Toss {joined} with olive oil, salt, and pepper.",
            "Grill for 8-10 minutes, turning occasionally, until cooked through.",
            "Rest for 3 minutes and serve hot.",
        ]
    if method in ("Fresh", "Simple", "Zesty"):
        return [
            "Wash and dry all ingredients thoroughly.",
            "Chop ingredients into bite-sized pieces and combine in a large bowl.",
            "Whisk olive oil, lemon juice or vinegar, salt, and pepper into a dressing.",
            "Toss with the dressing and let sit for 5 minutes before serving.",
        ]
    if method in ("Sweet", "Decadent", "Creamy"):
        return [
            "Prepare all ingredients: wash, measure, and chop as needed.",
            "Combine the main ingredients in a mixing bowl.",
            "Add honey or maple syrup to taste and fold in delicate ingredients.",
            "Refrigerate for at least 30 minutes before serving.",
        ]
    if method in ("Morning", "Sunrise", "Energizing"):
        return [
            "Prepare all ingredients: wash, chop, and measure as needed.",
            "Heat butter or oil in a non-stick pan over medium heat.",
            "Cook the main ingredients for 3-4 minutes, stirring occasionally.",
            "Add any remaining ingredients and cook for another 2-3 minutes.",
            "Season with salt and pepper and serve hot.",
        ]
    return [
        "Prepare all ingredients: wash, chop, and measure as needed.",
        "Combine all ingredients in a suitable pan or bowl.",
        "Cook using your preferred method until done to your liking.",
        "Season with salt and pepper to taste.",
        "Let rest for a few minutes, garnish and serve.",
    ]


def build_generic_recipe(tokens: Sequence[str], dish_type: str, rng: random.Random) -> Recipe:
    """Compose a recipe from a random method adjective and dish noun."""
    vocabulary = DISH_VOCABULARY[dish_type]
    method = rng.choice(vocabulary["methods"])
    noun = rng.choice(vocabulary["nouns"])

    return Recipe(
        title=f"{method} {_title_case(tokens[0])} {noun}",
        ingredients=[
            *[format_ingredient(t) for t in tokens],
            "Salt and pepper to taste",
            "2 tbsp olive oil or butter",
            "Fresh herbs for garnish (optional)",
        ],
        steps=_steps_for_method(method, tokens),
        nutrition=estimate_recipe_nutrition(tokens, dish_type),
        cooking_time=vocabulary["cooking_time"],
        servings=vocabulary["servings"],
    )


# =============================================================================
# DEFAULTS FOR EMPTY INPUT
# =============================================================================
DEFAULT_RECIPES = [
    Recipe(
        title="Simple Mixed Salad",
        ingredients=["2 cups mixed greens", "1 tomato, diced", "1 cucumber, sliced",
                     "1/4 cup olive oil", "2 tbsp balsamic vinegar", "Salt and pepper to taste"],
        steps=["Wash and dry all vegetables thoroughly.",
               "Combine greens, tomato, and cucumber in a large bowl.",
               "Whisk olive oil, vinegar, salt, and pepper together.",
               "Drizzle the dressing over the salad, toss and serve."],
        nutrition=RecipeNutrition(calories=150, protein=2, fat=14, carbs=8),
        cooking_time="10 minutes",
        servings=2,
    ),
    Recipe(
        title="Basic Avocado Toast",
        ingredients=["2 slices whole grain bread", "1 ripe avocado", "1 tbsp lemon juice",
                     "Salt and pepper to taste"],
        steps=["Toast the bread until golden brown.",
               "Mash the avocado with lemon juice, salt, and pepper.",
               "Spread the avocado on the toast and serve immediately."],
        nutrition=RecipeNutrition(calories=280, protein=6, fat=18, carbs=28),
        cooking_time="10 minutes",
        servings=2,
    ),
]


# =============================================================================
# MAIN TOOL: synthesize_recipes
# =============================================================================
def synthesize_recipes(
    ingredients: Sequence[str],
    meal_type: str = "lunch",
    rng: Optional[random.Random] = None
) -> List[Recipe]:
    """
    Produce exactly two recipes for the given ingredients, offline.

    Args:
        ingredients: Ingredient strings in the order the user typed them.
        meal_type: "breakfast", "lunch", "dinner" or "snack"; decides which
                   generic dish types fill any gap left by the templates.
        rng: Random source for the generic branch. Pass a seeded
             random.Random for reproducible titles.

    Returns:
        Two Recipe objects. Template recipes come first; titles are unique.

    Example:
        >>> [r.title for r in synthesize_recipes(["bread", "cheddar cheese"])]
        ['Gourmet Cheddar Cheese Grilled Sandwich', 'Gourmet Sandwich']
    """
    tokens = [t.strip() for t in ingredients if t and t.strip()]
    if not tokens:
        return [r.model_copy(deep=True) for r in DEFAULT_RECIPES]

    rng = rng or random.Random()
    primary, secondary = DISH_TYPES_BY_MEAL.get(meal_type, DISH_TYPES_BY_MEAL["lunch"])

    recipes = match_templates(tokens, meal_type)

    if not recipes:
        recipes.append(build_generic_recipe(tokens, primary, rng))

    while len(recipes) < RECIPES_PER_RESULT:
        dish_type = primary if "Salad" in recipes[-1].title else secondary
        recipe = build_generic_recipe(tokens, dish_type, rng)
        if recipe.title in {r.title for r in recipes}:
            recipe.title = ALTERNATIVE_PREFIX + recipe.title
        recipes.append(recipe)

    return recipes[:RECIPES_PER_RESULT]


__all__ = [
    "QUANTITY_RULES",
    "TEMPLATES",
    "DISH_VOCABULARY",
    "DEFAULT_RECIPES",
    "format_ingredient",
    "estimate_recipe_nutrition",
    "match_templates",
    "build_generic_recipe",
    "synthesize_recipes",
]
