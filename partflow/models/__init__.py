# Inventory
from partflow.models.inventory.part_models import PartModel
from partflow.models.inventory.inventory_change_models import InventoryChangeModel

# Catalog
from partflow.models.catalog.category_models import CategoryModel
from partflow.models.catalog.location_models import LocationModel
