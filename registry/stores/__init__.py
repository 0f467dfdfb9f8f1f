from registry.stores.base import SortDirection, UserStore, get_store

__all__ = ["SortDirection", "UserStore", "get_store"]
