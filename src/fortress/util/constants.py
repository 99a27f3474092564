"""Game constants — resource keys, species names, raid results.

Tunable numbers live in GameConfig; these are the fixed identifiers.
"""

# -- Resources -----------------------------------------------------------

WOOD = "wood"
STONE = "stone"
FOOD = "food"

RESOURCE_KEYS: tuple[str, ...] = (WOOD, STONE, FOOD)
"""Stock resources in display order. Focus tokens are tracked separately."""

# -- Structures ----------------------------------------------------------

WALL = "wall"
TOWER = "tower"
HATCHERY = "hatchery"

# -- Species -------------------------------------------------------------

RAPTOR = "Raptor"
TRICERATOPS = "Triceratops"
PTERANODON = "Pteranodon"
ANKYLOSAURUS = "Ankylosaurus"
SPINOSAURUS = "Spinosaurus"

# -- Raids ---------------------------------------------------------------

VICTORY = "victory"
BREACHED = "breached"
