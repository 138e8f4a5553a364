from partflow.dao.parts_dao import PartsDAO
from partflow.dao.inventory_dao import InventoryDAO
from partflow.dao.categories_dao import CategoriesDAO
from partflow.dao.locations_dao import LocationsDAO

__all__ = ["PartsDAO", "InventoryDAO", "CategoriesDAO", "LocationsDAO"]
