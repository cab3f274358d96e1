import pandas as pd
import numpy as np
from faker import Faker
from datetime import date
import random

# Set seed for reproducibility
np.random.seed(42)
random.seed(42)
fake = Faker()
Faker.seed(42)

# Feeding date of the generated export
FEEDING_DATE = date(2025, 3, 23)

SITES = ["Main Zoo", "Safari Park", "Aquarium"]
MEAL_TIMES = ["07:00 am", "11:30 am", "03:00 pm", "06:30 pm"]
FEED_TYPES = ["Fruits", "Vegetables", "Meat", "Insects", "Pellets", "Fish"]
GROUPS = ["Primates", "Carnivores", "Herbivores", "Birds", "Reptiles"]
CUT_SIZES = ["Whole", "Large chunks", "Small cubes", "Diced"]
PREPARATIONS = ["Washed", "Chopped", "Boiled", "Thawed"]

# species -> (scientific name, group, feed types)
SPECIES = {
    "Bornean Orangutan": ("Pongo pygmaeus", "Primates", ["Fruits", "Vegetables", "Pellets"]),
    "Ring-tailed Lemur": ("Lemur catta", "Primates", ["Fruits", "Vegetables", "Insects"]),
    "Bengal Tiger": ("Panthera tigris tigris", "Carnivores", ["Meat"]),
    "Asiatic Lion": ("Panthera leo persica", "Carnivores", ["Meat"]),
    "Reticulated Giraffe": ("Giraffa reticulata", "Herbivores", ["Vegetables", "Pellets"]),
    "Indian Rhinoceros": ("Rhinoceros unicornis", "Herbivores", ["Vegetables", "Pellets"]),
    "Scarlet Macaw": ("Ara macao", "Birds", ["Fruits", "Pellets"]),
    "Humboldt Penguin": ("Spheniscus humboldti", "Birds", ["Fish"]),
    "Leopard Gecko": ("Eublepharis macularius", "Reptiles", ["Insects"]),
}

# feed type -> [(ingredient, unit)]
INGREDIENTS = {
    "Fruits": [("Apple", "kg"), ("Banana", "kg"), ("Papaya", "kg"), ("Grapes", "gram")],
    "Vegetables": [("Carrot", "kg"), ("Cabbage", "kg"), ("Sweet Potato", "kg"), ("Lettuce", "gram")],
    "Meat": [("Beef", "kg"), ("Chicken", "kg"), ("Rabbit", "piece")],
    "Insects": [("Crickets", "pieces"), ("Mealworms", "pieces"), ("Locusts", "pieces")],
    "Pellets": [("Primate Pellets", "kg"), ("Herbivore Pellets", "kg")],
    "Fish": [("Capelin", "kg"), ("Sardine", "piece")],
}

# recipe name -> feed type of its ingredients
RECIPES = {
    "Fruit Salad Mix": "Fruits",
    "Vegetable Mix / Sprout Mix": "Vegetables",
}

# Title block above the table, like the real exports
TITLE_ROWS = [
    ["Daily Feeding Report"],
    [f"Generated {FEEDING_DATE.isoformat()}"],
    [],
]

COLUMNS = [
    "site_name", "animal_id", "common_name", "scientific_name", "section_name",
    "user_enclosure_name", "Feed type name", "diet_name", "diet_no", "ingredient_name",
    "type", "type_name", "group_name", "ingredient_qty", "base_uom_name",
    "ingredient_qty_gram", "base_uom_name_gram", "preparation_type_name",
    "meal_start_time", "meal_end_time", "cut_size_name", "feeding_date",
]


def grams_for(quantity, unit):
    """Gram weight of a quantity; zero for count units."""
    if unit == "kg":
        return round(quantity * 1000, 3)
    if unit == "gram":
        return quantity
    return 0.0


def random_quantity(unit):
    if unit == "kg":
        return round(float(np.random.uniform(0.05, 3.0)), 3)
    if unit == "gram":
        return float(np.random.choice([25, 50, 100, 150, 250]))
    return float(np.random.randint(1, 30))


def end_time(start):
    hour, rest = start.split(":", 1)
    return f"{int(hour) + 1:02d}:{rest}"


# 1. Animals - every species lives at one site in one or two enclosures
animal_rows = []
for common_name, (scientific_name, group, feed_types) in SPECIES.items():
    site = random.choice(SITES)
    enclosures = [f"{common_name.split()[-1]} {fake.word().title()} Enclosure" for _ in range(2)]
    diet_no = f"D{fake.unique.random_int(100, 999)}"
    for _ in range(random.randint(1, 5)):
        animal_rows.append({
            'site_name': site,
            'animal_id': f"A{fake.unique.random_int(1000, 9999)}",
            'common_name': common_name,
            'scientific_name': scientific_name,
            'section_name': f"{group} Section",
            'user_enclosure_name': random.choice(enclosures),
            'diet_name': f"{common_name} Standard Diet",
            'diet_no': diet_no,
            'group_name': group,
            'feed_types': feed_types,
        })

df_animals = pd.DataFrame(animal_rows)

# 2. Diet templates - most animals of a species eat the same, a few get extra
diet_templates = {}
for common_name, (_, _, feed_types) in SPECIES.items():
    template = []
    for meal_time in random.sample(MEAL_TIMES, random.randint(1, 2)):
        feed_type = random.choice(feed_types)
        recipe = next((name for name, ft in RECIPES.items() if ft == feed_type), None)
        if recipe and random.random() < 0.5:
            for ingredient, unit in random.sample(INGREDIENTS[feed_type], 3):
                template.append((meal_time, feed_type, ingredient, "Recipe", recipe, unit, random_quantity(unit)))
        else:
            for ingredient, unit in random.sample(INGREDIENTS[feed_type], 2):
                template.append((meal_time, feed_type, ingredient, "Ingredient", None, unit, random_quantity(unit)))
    diet_templates[common_name] = template

# 3. Feeding rows
feeding_rows = []
for animal in animal_rows:
    template = list(diet_templates[animal['common_name']])
    if random.random() < 0.2:
        # Individual supplement for this animal only
        meal_time, feed_type = template[0][0], template[0][1]
        ingredient, unit = random.choice(INGREDIENTS[feed_type])
        template.append((meal_time, feed_type, ingredient, "Ingredient", None, unit, random_quantity(unit)))

    for meal_time, feed_type, ingredient, item_type, recipe, unit, quantity in template:
        feeding_rows.append({
            'site_name': animal['site_name'],
            'animal_id': animal['animal_id'],
            'common_name': animal['common_name'],
            'scientific_name': animal['scientific_name'],
            'section_name': animal['section_name'],
            'user_enclosure_name': animal['user_enclosure_name'],
            'Feed type name': feed_type,
            'diet_name': animal['diet_name'],
            'diet_no': animal['diet_no'],
            'ingredient_name': ingredient,
            'type': item_type,
            'type_name': recipe,
            'group_name': animal['group_name'] if random.random() > 0.05 else None,
            'ingredient_qty': quantity,
            'base_uom_name': unit,
            'ingredient_qty_gram': grams_for(quantity, unit),
            'base_uom_name_gram': "gram" if grams_for(quantity, unit) else None,
            'preparation_type_name': random.choice(PREPARATIONS) if random.random() < 0.6 else None,
            'meal_start_time': meal_time,
            'meal_end_time': end_time(meal_time),
            'cut_size_name': random.choice(CUT_SIZES) if random.random() < 0.5 else None,
            'feeding_date': FEEDING_DATE.strftime("%m/%d/%Y"),
        })

df_feeding = pd.DataFrame(feeding_rows, columns=COLUMNS)

# Save the export twice: plain csv and an xlsx with a title block above the header
df_feeding.to_csv("feeding_export.csv", index=False)

sheet = pd.DataFrame(TITLE_ROWS + [COLUMNS] + df_feeding.replace({np.nan: None}).values.tolist())
sheet.to_excel("feeding_export.xlsx", header=False, index=False)

print(f"Generated {len(df_feeding)} feeding rows for {len(df_animals)} animals")
